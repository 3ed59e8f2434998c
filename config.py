import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./account_security.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    FRONTEND_URL = data.get("FRONTEND_URL", "http://localhost:3000")
    TOKEN_EXPIRY_MINUTES = int(data.get("TOKEN_EXPIRY_MINUTES", 60))
    ACCOUNT_RECOVERY_TOKEN_EXPIRY_HOURS = int(data.get("ACCOUNT_RECOVERY_TOKEN_EXPIRY_HOURS", 24))
    MAX_RESET_ATTEMPTS = int(data.get("MAX_RESET_ATTEMPTS", 5))
    RESET_ATTEMPT_WINDOW_MINUTES = int(data.get("RESET_ATTEMPT_WINDOW_MINUTES", 60))
    MAX_FAILED_LOGINS = int(data.get("MAX_FAILED_LOGINS", 5))
    ACCOUNT_LOCKOUT_MINUTES = int(data.get("ACCOUNT_LOCKOUT_MINUTES", 15))
    PROGRESSIVE_LOCKOUT_MULTIPLIER = int(data.get("PROGRESSIVE_LOCKOUT_MULTIPLIER", 2))
    PASSWORD_HASH_WORK_FACTOR = int(data.get("PASSWORD_HASH_WORK_FACTOR", 12))
    EXPIRED_TOKEN_RETENTION_HOURS = int(data.get("EXPIRED_TOKEN_RETENTION_HOURS", 24))
    AUDIT_RETENTION_DAYS = int(data.get("AUDIT_RETENTION_DAYS", 90))
    CONCURRENT_UPDATE_RETRIES = int(data.get("CONCURRENT_UPDATE_RETRIES", 3))
