"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
MAX_GRID_SIDE = 512
TRUE_WORDS = ("1", "true", "yes", "on")
FALSE_WORDS = ("0", "false", "no", "off")


@dataclass
class GridConfig:
    width: int | None = None
    height: int | None = None


@dataclass
class RenderConfig:
    shader: str = "Retro"
    flip: bool = False
    keep_cancelled_samples: bool = True


@dataclass
class CaptureConfig:
    folder: str | None = None
    cell_width: int = 8
    cell_height: int = 16
    font_path: str | None = None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    keep_files: int = 7
    console: bool = True


@dataclass
class AppConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Poorlaroid"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Poorlaroid"
    return Path.home() / ".config" / "poorlaroid"


def config_path() -> Path:
    return config_root() / "config.json"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()
    if raw is None:
        return defaults
    if not isinstance(raw, dict):
        raise TypeError(f"{dataclass_type.__name__} section must be an object")
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize(cfg: AppConfig) -> None:
    # unset grid sides follow the terminal size
    if cfg.grid.width is not None:
        cfg.grid.width = max(1, min(MAX_GRID_SIDE, int(cfg.grid.width)))
    if cfg.grid.height is not None:
        cfg.grid.height = max(1, min(MAX_GRID_SIDE, int(cfg.grid.height)))
    cfg.render.shader = str(cfg.render.shader)
    cfg.render.flip = _as_bool(cfg.render.flip)
    cfg.render.keep_cancelled_samples = _as_bool(cfg.render.keep_cancelled_samples)
    cfg.capture.cell_width = max(1, int(cfg.capture.cell_width))
    cfg.capture.cell_height = max(1, int(cfg.capture.cell_height))
    cfg.logging.level = str(cfg.logging.level).upper()
    if cfg.logging.level not in LOG_LEVELS:
        cfg.logging.level = "INFO"
    cfg.logging.keep_files = max(2, int(cfg.logging.keep_files))
    cfg.logging.console = _as_bool(cfg.logging.console)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("ignoring malformed config %s", path)
        return AppConfig()

    try:
        cfg = AppConfig(
            grid=_merge(GridConfig, raw.get("grid", {})),
            render=_merge(RenderConfig, raw.get("render", {})),
            capture=_merge(CaptureConfig, raw.get("capture", {})),
            logging=_merge(LoggingConfig, raw.get("logging", {})),
        )
        _normalize(cfg)
    except (TypeError, ValueError) as exc:
        logger.warning("ignoring invalid config %s: %s", path, exc)
        return AppConfig()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
