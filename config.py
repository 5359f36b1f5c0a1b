import os
from sqlalchemy.pool import QueuePool
from urllib.parse import urlparse
import pymysql
pymysql.install_as_MySQLdb()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _split(value):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change_this_secret_key')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRATION_HOURS = int(os.getenv('JWT_EXPIRATION_HOURS', '24'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 2,
        "pool_timeout": 10,
        "pool_pre_ping": True,
    }

    CORS_ORIGINS = _split(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"))

    # Uploads
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024
    RESOURCE_EXTENSIONS = {
        "pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "txt",
        "mp4", "webm", "avi", "mov", "wmv",
        "jpg", "jpeg", "png", "gif", "svg",
    }
    DROPBOX_APP_KEY = os.getenv("DROPBOX_APP_KEY")
    DROPBOX_APP_SECRET = os.getenv("DROPBOX_APP_SECRET")
    DROPBOX_REFRESH_TOKEN = os.getenv("DROPBOX_REFRESH_TOKEN")
    DROPBOX_ROOT = os.getenv("DROPBOX_ROOT", "/LearnMap")

    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "False") == "True"
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

class DevConfig(Config):
    """Development Configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'mysql+pymysql://root:@localhost/learnmap_db')

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-bytes'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # in-memory SQLite gets a static pool from Flask-SQLAlchemy, no QueuePool here
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORAGE_BACKEND = "local"

class ProdConfig(Config):
    """Production Configuration"""
    DEBUG = False

    raw_db_url = os.getenv('DATABASE_URL')

    if raw_db_url:
        if raw_db_url.startswith("mysql://"):
            raw_db_url = raw_db_url.replace("mysql://", "mysql+pymysql://", 1)

        parsed_url = urlparse(raw_db_url)
        SQLALCHEMY_DATABASE_URI = f"{parsed_url.scheme}://{parsed_url.netloc}{parsed_url.path}"
    else:
        SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///learnmap.db')

config_dict = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProdConfig
}
