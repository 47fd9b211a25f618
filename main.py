"""
Citemark API - Main Entry Point.

This is a convenience wrapper for the API server.
For development with auto-reload, use: uvicorn citemark.api.main:app --reload
"""
import os

import uvicorn

from citemark.utils.logger import step_logger


def main():
    """Serve the rendering API."""
    host = os.getenv("CITEMARK_HOST", "0.0.0.0")
    port = int(os.getenv("CITEMARK_PORT", "8000"))

    step_logger.info(f"Starting Citemark API server on {host}:{port}...")
    uvicorn.run("citemark.api.main:app", host=host, port=port, log_level="info")
    return 0


if __name__ == "__main__":
    exit(main())
