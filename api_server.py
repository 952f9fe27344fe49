#!/usr/bin/env python
"""
FastAPI server for the Gig Guide API
Serves the REST API and uploaded media for the web UI
"""
import logging
import os
import sys

# Add src to Python path (relative to api_server.py) so the server runs from a checkout
src_path = os.path.join(os.path.dirname(__file__), "src")
if os.path.exists(src_path) and src_path not in sys.path:
    sys.path.insert(0, src_path)

from gig_guide.app import create_app  # noqa: E402
from gig_guide.config import config  # noqa: E402

app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger = logging.getLogger(__name__)

    logger.info("=" * 50)
    logger.info("Gig Guide API - Starting Up")
    logger.info("=" * 50)
    logger.info(f"Python version: {sys.version}")
    logger.info(f"ENV: {config.ENV}")
    logger.info(f"DATABASE_URL: {'SQLite' if config.is_sqlite else 'PostgreSQL'}")
    logger.info(f"Uploads: {config.UPLOADS_ROOT} served at {config.UPLOADS_URL_PREFIX}")
    logger.info(f"Health check endpoint: http://0.0.0.0:{config.PORT}/health")
    logger.info("=" * 50)

    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=config.PORT,
            log_config=None,
            access_log=True,
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)
