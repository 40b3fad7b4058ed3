"""Main application entry point."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from suvidha.config import get_settings  # noqa: E402
from suvidha.services.logging import setup_server_logging  # noqa: E402

settings = get_settings()

# Configure logging (with file logging)
setup_server_logging(log_file=settings.log_file, level_name=settings.log_level)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API server with uvicorn."""
    from suvidha.api.app import app

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    logger.info(f"Starting Uvicorn server on {host}:{port}...")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
