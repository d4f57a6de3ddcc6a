"""Settings loading utilities."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.config.models import LogminSettings
from core.utils.errors import ConfigError


def load_settings(path: Path | None = None) -> LogminSettings:
    """Load and validate settings from YAML, falling back to the bundled file."""

    settings_path = path or Path(__file__).with_name("settings.yaml")

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Settings file not found: {settings_path}", path=settings_path) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"Invalid YAML in settings file: {settings_path}", path=settings_path
        ) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Settings file must contain a mapping: {settings_path}", path=settings_path
        )

    try:
        return LogminSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings schema: {settings_path}", path=settings_path) from exc
