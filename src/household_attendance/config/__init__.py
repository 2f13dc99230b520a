import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "household_attendance.config.production"

    if env in {"test", "testing"}:
        return "household_attendance.config.testing"

    return "household_attendance.config.development"
