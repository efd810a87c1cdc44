"""Central configuration for scantrim."""

import logging
from pathlib import Path

from .profile_loader import (
    ProfileConfig,
    RETENTION_RULES,
    get_default_profile,
    get_default_profile_name,
    get_profiles_dir,
    list_available_profiles,
    load_profile,
    load_profile_file,
)
from .profile_manager import get_profile, reset_profile, set_profile, use_profile

logger = logging.getLogger(__name__)


def get_app_name() -> str:
    """Get application name."""
    return "scantrim"


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except (OSError, ImportError, ValueError) as e:
        logger.debug("Could not read version from pyproject.toml: %s", e)
        return "0.1.0"


__all__ = [
    'ProfileConfig',
    'RETENTION_RULES',
    'get_app_name',
    'get_app_version',
    'get_default_profile',
    'get_default_profile_name',
    'get_profile',
    'get_profiles_dir',
    'list_available_profiles',
    'load_profile',
    'load_profile_file',
    'reset_profile',
    'set_profile',
    'use_profile',
]
