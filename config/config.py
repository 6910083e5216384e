"""Settings shared by every environment, read from the process environment."""
import os


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "scholar_portal"),
    }


def mail_settings_from_env(*, default_sender: str = "") -> dict:
    """Flask-Mail keys (host, port, TLS mode, credentials)."""
    username = os.getenv("MAIL_USERNAME", "")
    return {
        "MAIL_SERVER": os.getenv("MAIL_SERVER", "localhost"),
        "MAIL_PORT": int(os.getenv("MAIL_PORT", "587")),
        "MAIL_USE_TLS": env_flag("MAIL_USE_TLS", "1"),
        "MAIL_USE_SSL": env_flag("MAIL_USE_SSL", "0"),
        "MAIL_USERNAME": username or None,
        "MAIL_PASSWORD": os.getenv("MAIL_PASSWORD") or None,
        "MAIL_DEFAULT_SENDER": os.getenv("MAIL_DEFAULT_SENDER")
        or (f"Scholar Portal Admin <{username}>" if username else None)
        or default_sender
        or None,
    }


PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
