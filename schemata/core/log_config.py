# (c) Copyright Datacraft, 2026
"""Logging bootstrap from a YAML dictConfig file."""
import logging
import os
from logging.config import dictConfig
from pathlib import Path

import yaml

from schemata.core.config import get_settings

logger = logging.getLogger(__name__)

LOGGING_CFG_ENV = "SCHEMATA_LOGGING_CFG"


def configure_logging(path: Path | None = None) -> bool:
	"""
	Apply the logging configuration found at ``path``.

	Falls back to ``$SCHEMATA_LOGGING_CFG`` and then to the ``log_config``
	setting. Returns False when no configuration file exists.
	"""
	if path is None and os.environ.get(LOGGING_CFG_ENV):
		path = Path(os.environ[LOGGING_CFG_ENV])
	if path is None:
		path = get_settings().log_config
	if path is None or not path.is_file():
		return False

	with open(path, "r") as stream:
		config = yaml.load(stream, Loader=yaml.FullLoader)

	dictConfig(config)
	logger.debug(f"Logging configured from {path}")
	return True
