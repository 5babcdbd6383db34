from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any

from paramguard.constants import ENV_ENABLED, ENV_FREEZE_ON_FIRST_CALL


@dataclass(slots=True, frozen=True)
class Settings:
    enabled: bool = True
    freeze_on_first_call: bool = False

    @staticmethod
    def from_env() -> Settings:
        enabled = os.getenv(ENV_ENABLED, "1").strip() != "0"
        freeze_on_first_call = os.getenv(ENV_FREEZE_ON_FIRST_CALL, "0").strip() == "1"
        return Settings(enabled=enabled, freeze_on_first_call=freeze_on_first_call)


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def configure(**overrides: Any) -> Settings:
    global _SETTINGS
    _SETTINGS = dataclasses.replace(get_settings(), **overrides)
    return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    _SETTINGS = None


__all__ = ["Settings", "configure", "get_settings", "reset_settings"]
