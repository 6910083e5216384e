from .config import LOG_LEVEL, SESSION_DAYS, db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="")
MAIL_SETTINGS = {
    "MAIL_SERVER": "localhost",
    "MAIL_PORT": 25,
    "MAIL_USE_TLS": False,
    "MAIL_USE_SSL": False,
    "MAIL_DEFAULT_SENDER": "noreply@example.com",
    "MAIL_SUPPRESS_SEND": True,
}

# Fast hash so the suite does not spend its time in scrypt.
PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
