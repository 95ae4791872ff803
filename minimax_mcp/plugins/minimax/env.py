"""Credential resolution for the MiniMax plugins.

The API key is looked up once, when the extension starts, in this order:

1. MINIMAX_API_KEY environment variable
2. Project settings: <workspace>/.pi/settings.json
3. User settings:    ~/.pi/agent/settings.json

Settings documents are owned by the host; we only read the ``minimax.key``
field from them and never write them. The API host comes from
MINIMAX_API_HOST, independent of where the key came from.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)


DEFAULT_MINIMAX_API_HOST = "https://api.minimax.io"

ENV_API_KEY = "MINIMAX_API_KEY"
ENV_API_HOST = "MINIMAX_API_HOST"
ENV_WORKSPACE_ROOT = "MINIMAX_WORKSPACE_ROOT"

PROJECT_SETTINGS_PATH = Path(".pi") / "settings.json"
USER_SETTINGS_PATH = Path(".pi") / "agent" / "settings.json"

# Key sources reported by resolve_key_source()
SOURCE_ENVIRONMENT = "environment"
SOURCE_PROJECT = "project"
SOURCE_USER = "user"

PathLike = Union[str, Path]


def resolve_api_key() -> Optional[str]:
    """Resolve MiniMax API key from environment.

    Checks:
    1. MINIMAX_API_KEY environment variable

    Returns:
        API key if set and non-empty, None otherwise.
    """
    return os.environ.get(ENV_API_KEY) or None


def resolve_base_url() -> str:
    """Resolve MiniMax API host.

    Checks:
    1. MINIMAX_API_HOST environment variable

    Returns:
        Base URL without trailing slash (default: https://api.minimax.io).
    """
    host = os.environ.get(ENV_API_HOST) or DEFAULT_MINIMAX_API_HOST
    return host.rstrip("/") or DEFAULT_MINIMAX_API_HOST


def resolve_workspace() -> Path:
    """Resolve the project directory that holds the project settings.

    Uses MINIMAX_WORKSPACE_ROOT if set, otherwise the current directory.
    """
    return Path(os.environ.get(ENV_WORKSPACE_ROOT) or os.getcwd())


def get_project_settings_path(workspace: Optional[PathLike] = None) -> Path:
    base = Path(workspace) if workspace is not None else resolve_workspace()
    return base / PROJECT_SETTINGS_PATH


def get_user_settings_path(home: Optional[PathLike] = None) -> Path:
    base = Path(home) if home is not None else Path.home()
    return base / USER_SETTINGS_PATH


def load_settings_key(path: PathLike) -> Optional[str]:
    """Read ``minimax.key`` from a JSON settings document.

    A missing file, unreadable file, invalid JSON, or a document of the wrong
    shape all count as "no key here".

    Args:
        path: Settings file to read.

    Returns:
        The key string, or None.
    """
    try:
        with open(path, encoding="utf-8") as f:
            settings = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable settings file %s: %s", path, exc)
        return None

    if not isinstance(settings, dict):
        logger.debug("Ignoring settings file %s: top level is not an object", path)
        return None
    section = settings.get("minimax")
    if not isinstance(section, dict):
        return None
    key = section.get("key")
    if isinstance(key, str) and key:
        return key
    return None


def resolve_key_source(
    workspace: Optional[PathLike] = None,
    home: Optional[PathLike] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Find the API key and the source that supplied it.

    Args:
        workspace: Project directory (default: resolve_workspace()).
        home: User home directory (default: Path.home()).

    Returns:
        ``(key, source)`` where source is "environment", "project" or
        "user"; ``(None, None)`` when no source has a key.
    """
    env_key = resolve_api_key()
    if env_key:
        return env_key, SOURCE_ENVIRONMENT

    try:
        project_path = get_project_settings_path(workspace)
    except OSError as exc:
        logger.debug("Cannot determine project settings path: %s", exc)
        project_path = None
    if project_path is not None:
        key = load_settings_key(project_path)
        if key:
            return key, SOURCE_PROJECT

    try:
        user_path = get_user_settings_path(home)
    except (OSError, RuntimeError) as exc:
        # Path.home() raises RuntimeError when the home directory is unknown
        logger.debug("Cannot determine user settings path: %s", exc)
        user_path = None
    if user_path is not None:
        key = load_settings_key(user_path)
        if key:
            return key, SOURCE_USER

    return None, None


def resolve(
    workspace: Optional[PathLike] = None,
    home: Optional[PathLike] = None,
) -> "MiniMaxConfig":
    """Build the session configuration from environment and settings files.

    Never raises; an unresolvable key yields an unconfigured session.

    Args:
        workspace: Project directory (default: resolve_workspace()).
        home: User home directory (default: Path.home()).

    Returns:
        A new MiniMaxConfig.
    """
    from .config import MiniMaxConfig

    key, source = resolve_key_source(workspace, home)
    if key:
        logger.debug("MiniMax API key resolved from %s", source)
    return MiniMaxConfig(
        api_key=key or "",
        api_host=resolve_base_url(),
        configured=bool(key),
    )
