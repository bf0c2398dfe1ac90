"""Studio-wide settings loaded from ``config/studio.yaml``.

``STUDIO_CONFIG`` may point at an alternative YAML file. Tests and embedding
applications can install a settings object directly with
:func:`configure_settings`.
"""
from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class StudioSettings(BaseModel):
    currency_prefix: str = "₹"
    top_n: int = 10
    coverage: dict[str, int] = Field(default_factory=lambda: {"photographer": 1})
    min_payment_amount: Decimal = Decimal("1")
    max_payment_amount: Decimal = Decimal("999999")
    remarks_max_length: int = 200
    payment_horizon_years: int = 1
    warning_ratio: Decimal = Decimal("0.3")
    client_outstanding_warning: Decimal = Decimal("50000")


def _config_path() -> Path:
    env_path = os.getenv("STUDIO_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return CONFIG_DIR / "studio.yaml"


def load_settings(path: Path | None = None) -> StudioSettings:
    path = path or _config_path()
    if not path.exists():
        return StudioSettings()
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return StudioSettings(**data)


_settings: StudioSettings | None = None


def get_settings() -> StudioSettings:
    """Return the active settings, loading them on first use."""

    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def configure_settings(settings: StudioSettings | None) -> None:
    """Install ``settings``; ``None`` forces a reload on next access."""

    global _settings
    _settings = settings
