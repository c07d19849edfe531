#!/usr/bin/env python3
"""
Start the Job Tracker API for local development
"""
import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).parent / "job_tracker_app"


def setup_environment(database_url: str) -> None:
    """Fill in development defaults without overriding anything already exported."""
    defaults = {
        "ENVIRONMENT": "development",
        "DATABASE_URL": database_url,
        "CORS_ENABLED": "true",
        "API_DOCS_ENABLED": "true",
        "LOG_LEVEL": "INFO",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


def main():
    parser = argparse.ArgumentParser(description="Job Tracker API development server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--database-url", default="sqlite:///./job_tracker.db")
    args = parser.parse_args()

    if not (APP_DIR / "backend" / "main.py").exists():
        logger.error("Backend main.py not found under %s", APP_DIR)
        sys.exit(1)

    setup_environment(args.database_url)
    logger.info("API docs: http://%s:%s/docs", args.host, args.port)

    uvicorn.run(
        "backend.main:app",
        app_dir=str(APP_DIR),
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
