#!/usr/bin/env python3
"""
Queue Backend Server Runner

Starts the queue API with uvicorn. Command-line options override the
corresponding environment variables / .env settings.

Usage:
    python run_server.py [--host HOST] [--port PORT] [--storage-path PATH] [--log-level LEVEL]

Options:
    --host HOST           Interface to bind (SERVER_HOST)
    --port PORT           Port to listen on (SERVER_PORT)
    --storage-path PATH   Queue snapshot file (QUEUE_STORAGE_FILE_PATH)
    --log-level LEVEL     DEBUG, INFO, WARNING or ERROR (LOG_LEVEL)
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

from src.core.config import reload_settings
from src.core.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv()


def apply_overrides(args) -> dict:
    """Copy command-line overrides into the environment.

    Returns:
        The environment variables that were set
    """
    overrides = {}
    if args.host:
        overrides["SERVER_HOST"] = args.host
    if args.port:
        overrides["SERVER_PORT"] = str(args.port)
    if args.storage_path:
        overrides["QUEUE_STORAGE_FILE_PATH"] = args.storage_path
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    os.environ.update(overrides)
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the queue backend API server")
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--storage-path", type=str, help="Path of the queue snapshot file")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main():
    """Run the queue backend server."""
    args = build_parser().parse_args()
    apply_overrides(args)

    settings = reload_settings()
    logger = setup_logging(settings)
    logger.info(
        f"Queue backend listening on {settings.server.host}:{settings.server.port}, "
        f"storage={settings.storage.resolve_file_path()}"
    )

    uvicorn.run(
        "src.api.server:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
