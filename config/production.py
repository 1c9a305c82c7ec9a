import os

from .config import auto_clock_out_config, db_config, env_flag, leave_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

AUTO_CLOCK_OUT = auto_clock_out_config()
# Production normally runs scripts/run_auto_clock_out.py from cron instead.
START_SCHEDULER = env_flag("START_SCHEDULER", "0")

LEAVE = leave_config()
