#!/usr/bin/env python3
"""Utility functions for abcanon.

This module provides helper functions for:
- Configuring logging
- Locating the canonical definition file
"""

import logging
import os
from pathlib import Path
from typing import Optional

from abcanon import constants

LOGGER = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag.

    Args:
        verbose: If True, set logging level to INFO. Otherwise, set to WARNING.
    """
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, force=True)


def resolve_rules_path(
    name: str, env_var: str = constants.RULES_DIR_ENV
) -> Optional[Path]:
    """Find a canonical definition file.

    The name is tried as given first, then inside the directory named by
    the ``env_var`` environment variable.

    Args:
        name: File name or path of the definition file.
        env_var: Environment variable holding the fallback directory.

    Returns:
        Path to the file, or None if it was found in neither place.
    """
    path = Path(name)
    if path.is_file():
        return path

    directory = os.environ.get(env_var)
    if directory:
        candidate = Path(directory) / name
        if candidate.is_file():
            LOGGER.info(f"Using canonical definitions from ${env_var}")
            return candidate
    return None
