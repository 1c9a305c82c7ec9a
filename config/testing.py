from .config import auto_clock_out_config, db_config, env_flag, leave_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config(default_password="12345")

DEBUG = False
TESTING = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

AUTO_CLOCK_OUT = auto_clock_out_config()
START_SCHEDULER = False

LEAVE = leave_config()
