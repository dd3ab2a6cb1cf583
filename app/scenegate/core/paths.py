"""XDG-compliant path management for scenegate.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage, plus the default
location of the VR client's data directory.

XDG defaults:
- Config: ~/.config/scenegate/
- State: ~/.local/state/scenegate/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "scenegate"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/scenegate/ (or XDG_CONFIG_HOME/scenegate/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the content index that should persist between
    runs but is not configuration.

    Returns:
        Path to ~/.local/state/scenegate/ (or XDG_STATE_HOME/scenegate/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_settings_path() -> Path:
    """Get the default settings file path.

    Returns:
        Path to ~/.config/scenegate/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_blocklist_dir() -> Path:
    """Get the default blocklist definition directory.

    Returns:
        Path to ~/.config/scenegate/blocklists/.
    """
    return get_config_dir() / "blocklists"


def get_index_path() -> Path:
    """Get the default content index file path.

    Returns:
        Path to ~/.local/state/scenegate/index.json.
    """
    return get_state_dir() / "index.json"


def get_default_client_dir() -> Path:
    """Get the default VR client data directory.

    The client writes its logs and its content cache below this
    directory. On Linux the client runs under Proton, so the same
    relative layout is used below the home directory.

    Returns:
        Path to ~/AppData/LocalLow/VRChat/VRChat (or %LOCALAPPDATA%Low/...).
    """
    local_appdata = os.environ.get("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata + "Low") / "VRChat" / "VRChat"
    return Path.home() / "AppData" / "LocalLow" / "VRChat" / "VRChat"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
