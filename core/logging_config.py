"""
core/logging_config.py -- Process-wide logging setup.

Every module logs through a named stdlib logger under the "rolegate."
namespace (e.g. "rolegate.auth", "rolegate.api"). This module only installs
the root handler and format; it is called once from the app factory and the
CLI.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler. A no-op if the root logger already has handlers."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
