"""
Configuration management for GradeAI backend.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")

# API Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

# Grading configuration
DEFAULT_GRADING_MODEL = "gpt-4.1-2025-04-14"
DEFAULT_MAX_TOKENS = 1500
DEFAULT_TOTAL_POINTS = 100

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _env_flag(name):
    return os.getenv(name, "").lower() in ("1", "true", "yes")


class Config:
    """Application configuration class."""

    def __init__(self):
        self.supabase_url = SUPABASE_URL
        self.supabase_service_key = SUPABASE_SERVICE_KEY
        self.jwt_secret = SUPABASE_JWT_SECRET
        self.openai_api_key = OPENAI_API_KEY
        self.anthropic_api_key = ANTHROPIC_API_KEY
        self.grading_model = os.getenv("GRADING_MODEL", DEFAULT_GRADING_MODEL)
        self.max_tokens = int(os.getenv("GRADING_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
        self.local_dev = _env_flag("GRADEAI_LOCAL_DEV")

    def to_dict(self):
        return {
            "supabase_url": self.supabase_url,
            "grading_model": self.grading_model,
            "max_tokens": self.max_tokens,
            "local_dev": self.local_dev,
            "openai_configured": bool(self.openai_api_key),
            "anthropic_configured": bool(self.anthropic_api_key),
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
