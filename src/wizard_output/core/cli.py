"""
Command line entry point for serving the configuration wizard.
"""

import argparse
import logging
import sys
from collections.abc import Callable

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import ValidationError

from wizard_output.core.app.application_factory import build_app
from wizard_output.core.common.exceptions import ConfigurationError
from wizard_output.core.common.logging_utils import (
    configure_logging_with_environment_tagging,
)
from wizard_output.core.config.app_config import AppConfig, LogLevel, load_config


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Serve the configuration wizard")
    parser.add_argument("--config", dest="config_file", help="Path to a YAML config file")
    parser.add_argument("--host", dest="host", help="Interface to bind to")
    parser.add_argument("--port", dest="port", type=int, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[level.value for level in LogLevel],
        type=str.upper,
        help="Logging level",
    )
    parser.add_argument("--log-file", dest="log_file", help="Also write logs to this file")
    return parser


def apply_cli_args(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply command line overrides on top of it."""
    cfg = load_config(args.config_file)
    if args.host:
        cfg.host = args.host
    if args.port is not None:
        cfg.port = args.port
    if args.log_level:
        cfg.logging.level = LogLevel(args.log_level)
    if args.log_file:
        cfg.logging.log_file = args.log_file
    return cfg


def _configure_logging(cfg: AppConfig) -> None:
    """Configure logging based on configuration."""
    configure_logging_with_environment_tagging(
        level=getattr(logging, cfg.logging.level.value),
        log_file=cfg.logging.log_file,
    )


def main(
    argv: list[str] | None = None,
    build_app_fn: Callable[[AppConfig], FastAPI] | None = None,
) -> None:
    """Parse arguments, configure logging and run the server."""
    load_dotenv()
    args = build_cli_parser().parse_args(argv)

    try:
        cfg = apply_cli_args(args)
    except (ConfigurationError, ValidationError) as e:
        sys.stderr.write(f"\nERROR: Invalid configuration: {e}\n")
        sys.exit(2)

    _configure_logging(cfg)

    app = (build_app_fn or build_app)(cfg)

    logging.info("Starting uvicorn on %s:%s", cfg.host, cfg.port)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)


if __name__ == "__main__":
    main()
