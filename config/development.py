import os

from .config import LOG_LEVEL, PASSWORD_HASH_METHOD, SESSION_DAYS, db_config_from_env, env_flag, mail_settings_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="")
MAIL_SETTINGS = mail_settings_from_env(default_sender="Scholar Portal <noreply@localhost>")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
