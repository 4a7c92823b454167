import json
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_COLOR = 2
DEFAULT_FONT = "block"
DEFAULT_TRACKER = "timew"


def get_config_dir() -> Path:
    system = platform.system().lower()
    if system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            base = Path.home() / "AppData" / "Roaming"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "bigclock"


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


def get_log_path() -> Path:
    return get_config_dir() / "bigclock.log"


def load_config() -> Dict[str, Any]:
    path = get_config_path()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError:
        return {}
    return {}


def save_config(data: Dict[str, Any]) -> None:
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def get_color(config: Dict[str, Any]) -> int:
    color = config.get("color")
    if isinstance(color, int) and not isinstance(color, bool):
        return color
    return DEFAULT_COLOR


def get_timezone(config: Dict[str, Any]) -> Optional[str]:
    tz = config.get("timezone")
    if isinstance(tz, str) and tz:
        return tz
    return None


def get_font(config: Dict[str, Any]) -> str:
    font = config.get("font")
    if isinstance(font, str) and font:
        return font
    return DEFAULT_FONT


def get_tracker(config: Dict[str, Any]) -> Optional[str]:
    """Tracker program name; an explicit ``null`` in the file disables hooks."""
    if "tracker" not in config:
        return DEFAULT_TRACKER
    tracker = config["tracker"]
    if isinstance(tracker, str) and tracker:
        return tracker
    return None


def get_command(config: Dict[str, Any]) -> Optional[str]:
    command = config.get("command")
    if isinstance(command, str) and command.strip():
        return command
    return None
