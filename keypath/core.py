import logging
import logging.handlers
import os
import sys
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# ---------------- Logging ----------------

_FMT = logging.Formatter(
    '{"ts":"%(asctime)s","level":"%(levelname)s","step":"%(name)s","msg":"%(message)s"}'
)
_LOGGERS = set()


def get_logger(name="keypath", log_file=None):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    level = os.environ.get("KEYPATH_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(_FMT)
    logger.addHandler(sh)
    if log_file:
        _add_file_handler(logger, log_file)
    _LOGGERS.add(name)
    return logger


def _add_file_handler(logger: logging.Logger, log_file: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    fh = logging.handlers.RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=5)
    fh.setFormatter(_FMT)
    logger.addHandler(fh)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Apply a level (and optional rotating log file) to every keypath logger."""
    if "KEYPATH_LOG_LEVEL" in os.environ:
        level = os.environ["KEYPATH_LOG_LEVEL"]
    resolved = getattr(logging, level.upper(), logging.INFO)
    for name in _LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        has_file = any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
        if log_file and not has_file:
            _add_file_handler(logger, log_file)


log = get_logger("keypath")

# ---------------- Config Models ----------------


class AnimationCfg(BaseModel):
    fps: int = Field(30, ge=1, le=120)
    total_frames: int = Field(60, ge=1)
    width: float = 800
    height: float = 600
    background_color: str = "#ffffff"


class ImportCfg(BaseModel):
    layer_name: str = "Imported SVG"
    fallback_width: float = 800
    fallback_height: float = 600


class ExportCfg(BaseModel):
    lottie_version: str = "5.7.4"
    name: str = "keypath export"
    default_stroke_width: float = 1.0


class HistoryCfg(BaseModel):
    max_depth: int = Field(10_000, ge=1)


class LoggingCfg(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None


class GlobalCfg(BaseModel):
    animation: AnimationCfg = AnimationCfg()
    importing: ImportCfg = Field(default_factory=ImportCfg, alias="import")
    export: ExportCfg = ExportCfg()
    history: HistoryCfg = HistoryCfg()
    logging: LoggingCfg = LoggingCfg()

    model_config = {"populate_by_name": True}


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must be a mapping/object.")
    return data


def load_config(path: Optional[str] = None) -> GlobalCfg:
    """Load conf/keypath.yaml (or $KEYPATH_CONFIG) into a validated GlobalCfg.

    A missing file yields the built-in defaults.
    """
    load_dotenv(os.path.join(BASE, ".env"))
    if path is None:
        path = os.environ.get("KEYPATH_CONFIG") or os.path.join(BASE, "conf", "keypath.yaml")
    raw = load_yaml(path) if os.path.exists(path) else {}

    try:
        cfg = GlobalCfg(**raw)
    except ValidationError as e:
        log.error(f"Config validation failed: {e}")
        raise

    configure_logging(cfg.logging.level, cfg.logging.file)
    return cfg
