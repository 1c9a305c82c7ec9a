import os

from .config import auto_clock_out_config, db_config, env_flag, leave_config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config(default_password="123456")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo employees on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

AUTO_CLOCK_OUT = auto_clock_out_config()
START_SCHEDULER = env_flag("START_SCHEDULER", "1")

LEAVE = leave_config()
