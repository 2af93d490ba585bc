from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator

from wizard_output.core.common.exceptions import ConfigurationError
from wizard_output.core.domain.base import DomainModel
from wizard_output.core.domain.page_frame import DocLink, FrameContext, HeadAttributes

logger = logging.getLogger(__name__)


def _get_env_value(
    env: Mapping[str, str],
    name: str,
    *,
    transform: Callable[[str], Any] | None = None,
) -> Any:
    """Return an environment variable value, transformed, or None when unset."""
    if name not in env:
        return None
    raw_value = env[name]
    return transform(raw_value) if transform is not None else raw_value


def _to_int(value: str, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _to_float(value: str, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = None


def _default_doc_links() -> list[DocLink]:
    return [
        DocLink(label="Read me", url="?page=Readme"),
        DocLink(label="Release notes", url="?page=ReleaseNotes"),
        DocLink(label="Copying", url="?page=Copying"),
        DocLink(label="Upgrading", url="?page=UpgradeDoc"),
    ]


class FrameConfig(DomainModel):
    """Resolved strings used to render the page chrome."""

    title: str = "Installation wizard"
    lang: str = "en"
    dir: Literal["ltr", "rtl"] = "ltr"
    style_url: str | None = "?css=1"
    script_urls: list[str] = Field(
        default_factory=lambda: ["../resources/lib/jquery/jquery.js", "config.js"]
    )
    # Sidebar markup; sections are separated by "----"
    sidebar_text: str = ""
    logo: DocLink | None = None
    doc_links: list[DocLink] = Field(default_factory=_default_doc_links)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_frame_context(self) -> FrameContext:
        return FrameContext(
            attrs=HeadAttributes(lang=self.lang, dir=self.dir),
            title=self.title,
            style_url=self.style_url,
            script_urls=tuple(self.script_urls),
            sidebar_text=self.sidebar_text,
            logo=self.logo,
            doc_links=tuple(self.doc_links),
        )


class AppConfig(DomainModel):
    """Top-level application configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    frame: FrameConfig = Field(default_factory=FrameConfig)
    # Seconds between progress updates of the install step
    install_step_delay: float = 0.0

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Create AppConfig from ``WIZARD_*`` environment variables."""
        env = environ if environ is not None else os.environ
        return cls.model_validate(_env_overrides(env))

    def save(self, path: str | Path) -> None:
        """Write the configuration as YAML."""
        p = Path(path)
        with p.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect configuration values present in the environment as a nested dict."""
    mapping: dict[tuple[str, ...], tuple[str, Callable[[str], Any] | None]] = {
        ("host",): ("WIZARD_HOST", None),
        ("port",): ("WIZARD_PORT", lambda value: _to_int(value, 8000)),
        ("install_step_delay",): (
            "WIZARD_INSTALL_STEP_DELAY",
            lambda value: _to_float(value, 0.0),
        ),
        ("logging", "level"): ("WIZARD_LOG_LEVEL", str.upper),
        ("logging", "log_file"): ("WIZARD_LOG_FILE", None),
        ("frame", "title"): ("WIZARD_TITLE", None),
        ("frame", "lang"): ("WIZARD_LANG", None),
        ("frame", "dir"): ("WIZARD_DIR", str.lower),
        ("frame", "style_url"): ("WIZARD_STYLE_URL", None),
        ("frame", "script_urls"): ("WIZARD_SCRIPT_URLS", _split_csv),
        ("frame", "sidebar_text"): ("WIZARD_SIDEBAR_TEXT", None),
    }
    result: dict[str, Any] = {}
    for path, (name, transform) in mapping.items():
        value = _get_env_value(env, name, transform=transform)
        if value is None:
            continue
        target = result
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = value
    return result


def _merge_dicts(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge_dicts(base[key], value)
        else:
            base[key] = value


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load configuration from file and environment.

    Environment variables take precedence over values from the file.

    Args:
        config_path: Optional path to a YAML configuration file
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        AppConfig instance
    """
    env = environ if environ is not None else os.environ
    config_data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            logger.warning("Configuration file not found: %s", config_path)
        else:
            if path.suffix.lower() not in (".yaml", ".yml"):
                raise ConfigurationError(
                    f"Unsupported configuration file format: {path.suffix}. Use YAML (.yaml/.yml).",
                    details={"path": str(path)},
                )
            with path.open(encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    "Configuration file must contain a mapping",
                    details={"path": str(path)},
                )
            _merge_dicts(config_data, file_config)

    _merge_dicts(config_data, _env_overrides(env))
    return AppConfig.model_validate(config_data)
