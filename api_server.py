#!/usr/bin/env python3
"""
Runs the Threat Scoring API under uvicorn.

Collectors POST raw JSON events to /score, or structured events to /events
to get a full verdict that is also written to the detection log.

Usage:
    python api_server.py

Settings are read from THREATSCORE_HOST, THREATSCORE_PORT,
THREATSCORE_LOG_DIR and THREATSCORE_LOG_LEVEL.
"""

import uvicorn

from threatscore.api import create_app
from threatscore.settings import Settings


if __name__ == "__main__":
    settings = Settings()
    app = create_app(settings)

    print("Starting Threat Scoring API Server...")
    print(f"Listening on {settings.host}:{settings.port}")
    print(f"API Documentation: http://localhost:{settings.port}/docs")
    print(f"Health Check: http://localhost:{settings.port}/health")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        access_log=True,
    )
