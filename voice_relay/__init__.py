"""Local notification relay with speech synthesis and realtime fan-out."""
