"""
camview backend: root package.

Contains the FastAPI app entry point (main.py), API routes, domain models,
and infrastructure (MongoDB, ONVIF, FFmpeg stream relay, Ollama client).
"""
