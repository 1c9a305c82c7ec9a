"""Settings selection. ``APP_ENV`` names the module under ``config``."""

import os

_ENV_ALIASES = {
    "dev": "development",
    "development": "development",
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module(app_env: str = None) -> str:
    """Dotted path of the settings module; unknown names fall back to development."""
    env = (app_env or os.getenv("APP_ENV") or "development").strip().lower()
    return f"config.{_ENV_ALIASES.get(env, 'development')}"
