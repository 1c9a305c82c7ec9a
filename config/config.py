"""Settings shared by every environment, read from the process environment."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "timeclock_db"),
    }


def auto_clock_out_config() -> dict:
    return {
        "enabled": env_flag("AUTO_CLOCK_OUT_ENABLED", "1"),
        # 24-hour HH:MM; sessions still open are closed at this time of day.
        "default_time": os.getenv("AUTO_CLOCK_OUT_TIME", "17:30"),
        "log_events": env_flag("AUTO_CLOCK_OUT_LOG_EVENTS", "1"),
        # When the daily job fires.
        "run_at": os.getenv("AUTO_CLOCK_OUT_RUN_AT", "23:59"),
    }


def leave_config() -> dict:
    return {
        "default_pto_units": int(os.getenv("LEAVE_DEFAULT_PTO_UNITS", "10")),
        "default_sick_units": int(os.getenv("LEAVE_DEFAULT_SICK_UNITS", "5")),
        "allow_reversal": env_flag("LEAVE_ALLOW_REVERSAL", "0"),
    }
