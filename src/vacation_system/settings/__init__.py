import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unknown means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "vacation_system.settings.production"

    if env in {"test", "testing"}:
        return "vacation_system.settings.testing"

    return "vacation_system.settings.development"
