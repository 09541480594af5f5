from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, HTMLResponse, Response

from voice_relay.config import Settings
from voice_relay.interfaces.api.dependencies import get_app_settings

PLACEHOLDER_PAGE = """<!DOCTYPE html>
<html>
  <head><title>Voice Relay</title></head>
  <body>
    <h1>Voice Relay</h1>
    <p>Connect to <code>/ws</code> to receive notifications.</p>
  </body>
</html>
"""

router = APIRouter()


@router.get("/", include_in_schema=False)
async def index(settings: Settings = Depends(get_app_settings)) -> Response:
    if settings.static_dir:
        page = Path(settings.static_dir) / "index.html"
        if page.is_file():
            return FileResponse(page, media_type="text/html")
    return HTMLResponse(PLACEHOLDER_PAGE)
