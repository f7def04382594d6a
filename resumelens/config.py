# resumelens/config.py
from __future__ import annotations
import os

class Config:
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key")

    # OpenAI
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")
    OPENAI_MAX_TOKENS = int(os.environ.get("OPENAI_MAX_TOKENS", "4096"))
    OPENAI_TIMEOUT = float(os.environ.get("OPENAI_TIMEOUT", "60"))  # seconds, enforced by the client

    # Uploads (backend is the source of truth for the size ceiling)
    MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # CORS origins if you need them (comma-separated, empty = allow all)
    CORS_ORIGINS = [s.strip() for s in os.environ.get("CORS_ORIGINS", "").split(",") if s.strip()]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Portfolio templates offered to the client: id -> (name, description, tags)
    PORTFOLIO_TEMPLATES = {
        "minimal": (
            "Minimal Professional",
            "Clean, single-page layout perfect for traditional industries",
            ["Professional", "ATS-Friendly", "Traditional"],
        ),
        "creative": (
            "Creative Grid",
            "Bold typography and project showcase for creative professionals",
            ["Creative", "Modern", "Portfolio"],
        ),
        "technical": (
            "Technical Developer",
            "Code-inspired aesthetic ideal for software engineers",
            ["Developer", "Tech", "Dark Mode"],
        ),
    }

class DevConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG").upper()

class ProdConfig(Config):
    DEBUG = False

class TestConfig(Config):
    TESTING = True
    DEBUG = True
    OPENAI_API_KEY = ""

def get_config(env: str | None = None):
    """Resolve config by env string or environment variables."""
    env = (env or os.environ.get("RESUMELENS_ENV") or os.environ.get("FLASK_ENV") or "production").lower()
    if env in ("dev", "development"):
        return DevConfig
    if env in ("test", "testing"):
        return TestConfig
    return ProdConfig
