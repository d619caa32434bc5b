# config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# ============================================================
# 🌍 DETECT ENVIRONMENT AND LOAD THE MATCHING .env
# ============================================================
ENV = os.getenv("ENV", "development")

env_file = ".env.production" if ENV == "production" else ".env.development"
dotenv_path = Path(__file__).resolve().parent / env_file
load_dotenv(dotenv_path)

# ============================================================
# ⚙️ GENERAL SETTINGS
# ============================================================
class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Setlist Manager")
    VERSION: str = os.getenv("VERSION", "1.0")

    # 🔹 Document store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "mongodb://localhost:27017/setlist")
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "mongodb://localhost:27017/test-setlist")
    MONGO_DB: str = os.getenv("MONGO_DB", "setlist")
    SETLIST_COLLECTION: str = os.getenv("SETLIST_COLLECTION", "setlists")

    # 🔹 HTTP server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8080"))

    # 🔹 Others
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "*").split(",")
    DEBUG: bool = ENV == "development"
    ENV: str = ENV

settings = Settings()
