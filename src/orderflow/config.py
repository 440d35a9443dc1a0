from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    tax_enabled: bool = False
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


_ENV_PREFIX = "ORDERFLOW_"


def _find_pyproject(start_dir: Path) -> Path | None:
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / "pyproject.toml"
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _to_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Unsupported log level: {value!r} (expected one of {', '.join(_LOG_LEVELS)})")
    return level


def _from_sources(raw: Dict[str, Any]) -> Config:
    tax_enabled = _to_bool(os.getenv(f"{_ENV_PREFIX}TAX_ENABLED", raw.get("tax_enabled", False)), False)
    log_level = _to_log_level(os.getenv(f"{_ENV_PREFIX}LOG_LEVEL", raw.get("log_level", "WARNING")))
    return Config(tax_enabled=tax_enabled, log_level=log_level)


def config_from_mapping(raw: Dict[str, Any], base: Config | None = None) -> Config:
    """Overlay a scenario-supplied config block on ``base``.

    Accepts both ``taxEnabled`` and ``tax_enabled`` spellings. Environment
    variables do not apply here; the block is explicit input.
    """
    effective = base or Config()
    tax_value = raw.get("taxEnabled", raw.get("tax_enabled"))
    log_value = raw.get("logLevel", raw.get("log_level"))
    return Config(
        tax_enabled=effective.tax_enabled if tax_value is None else _to_bool(tax_value, effective.tax_enabled),
        log_level=effective.log_level if log_value is None else _to_log_level(log_value),
    )


@lru_cache(maxsize=32)
def load_config(start_dir: str | os.PathLike[str] | None = None) -> Config:
    root = Path(start_dir or os.getcwd()).resolve()
    pyproject = _find_pyproject(root)
    if pyproject is None:
        return _from_sources({})

    parsed = _load_toml(pyproject)
    tool = parsed.get("tool", {}) if isinstance(parsed, dict) else {}
    section = tool.get("orderflow", {}) if isinstance(tool, dict) else {}
    return _from_sources(section if isinstance(section, dict) else {})


def get_config() -> Config:
    return load_config(os.getcwd())


def refresh_config(start_dir: str | os.PathLike[str] | None = None) -> Config:
    load_config.cache_clear()
    return load_config(start_dir)
