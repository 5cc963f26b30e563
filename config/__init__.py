from __future__ import annotations

import os
from typing import Optional

_SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Settings module for `env`, falling back to $APP_ENV and then development."""
    env = (env or os.getenv("APP_ENV", "development")).lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
