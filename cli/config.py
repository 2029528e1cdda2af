import json
from pathlib import Path
from typing import Optional


APP_DIR = Path.home() / ".leitner"
DEFAULT_CONFIG = APP_DIR / "config.json"
DEFAULT_STORE = APP_DIR / "schedule.db"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json.

    A missing or unreadable file means "use the defaults".
    """
    config_path = config_path or DEFAULT_CONFIG
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def store_path(config: dict) -> Path:
    return Path(config.get("store_path") or DEFAULT_STORE).expanduser()


def export_dir(config: dict) -> Path:
    return Path(config.get("export_dir") or ".").expanduser()


def log_level(config: dict) -> str:
    level = str(config.get("log_level") or DEFAULT_LOG_LEVEL).upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL
