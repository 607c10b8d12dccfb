"""Settings for the Klondike app: defaults, a JSON file, then environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

LAYOUT_MODES = ("normal", "compact", "ultra-compact")

ENV_PREFIX = "KLONDIKE_"


@dataclass(frozen=True)
class Settings:
    bot_interval_ms: int = 1200
    deal_interval_ms: int = 50
    stuck_restart_delay_ms: int = 2000
    celebration_ms: int = 5000
    win_restart_delay_ms: int = 2000
    layout: str = "compact"
    seed: Optional[int] = None
    log_level: str = "WARNING"


# Keys persisted to settings.json; the rest only come from defaults or the environment.
_PERSISTED = ("bot_interval_ms", "deal_interval_ms", "layout")


def settings_dir() -> str:
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeBot")
    return os.path.join(os.path.expanduser("~"), ".klondike_bot")


def settings_path() -> str:
    return os.path.join(settings_dir(), "settings.json")


def _coerce(name: str, raw: Any) -> Any:
    if name == "seed":
        return None if raw in (None, "") else int(raw)
    if name == "layout":
        value = str(raw).strip().lower()
        if value not in LAYOUT_MODES:
            raise ValueError(f"Unknown layout mode: {raw!r}")
        return value
    if name == "log_level":
        value = str(raw).strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {raw!r}")
        return value
    return int(raw)


def _merge(base: Settings, values: Mapping[str, Any], origin: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    updates: Dict[str, Any] = {}
    for name, raw in values.items():
        if name not in known:
            continue
        try:
            updates[name] = _coerce(name, raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring %s from %s: %s", name, origin, exc)
    return replace(base, **updates)


def load_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    settings = Settings()
    path = path or settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        data = {}
    except (OSError, ValueError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        data = {}
    if isinstance(data, dict):
        settings = _merge(settings, {k: v for k, v in data.items() if k in _PERSISTED}, path)
    else:
        logger.warning("Settings file %s does not hold an object", path)

    environ = os.environ if environ is None else environ
    env_values = {}
    for f in fields(Settings):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            env_values[f.name] = environ[key]
    return _merge(settings, env_values, "environment")


def save_settings(settings: Settings, path: Optional[str] = None) -> bool:
    path = path or settings_path()
    data = {k: v for k, v in asdict(settings).items() if k in _PERSISTED}
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", path, exc)
        return False
    return True


def next_layout(layout: str) -> str:
    i = LAYOUT_MODES.index(layout) if layout in LAYOUT_MODES else 0
    return LAYOUT_MODES[(i + 1) % len(LAYOUT_MODES)]
