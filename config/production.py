import os

from .config import PASSWORD_HASH_METHOD, SESSION_DAYS, db_config_from_env, env_flag, mail_settings_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()
MAIL_SETTINGS = mail_settings_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
SESSION_COOKIE_SECURE = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
