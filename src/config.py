import os

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://postgres:root@db:5432/esign-db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
COMPLETED_DIR = os.getenv("COMPLETED_DIR", os.path.join(UPLOAD_DIR, "completed"))
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))  # 10 MB

INVITATION_EXPIRY_DAYS = int(os.getenv("INVITATION_EXPIRY_DAYS", "7"))
MAX_INVITATION_EXPIRY_DAYS = 30
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000")
EXPIRY_JOB_INTERVAL_HOURS = int(os.getenv("EXPIRY_JOB_INTERVAL_HOURS", "1"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() in ("1", "true", "yes")
