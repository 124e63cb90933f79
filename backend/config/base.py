"""Base configuration shared by every environment."""
import os
from datetime import timedelta


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'

    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "200 per day;50 per hour"
    RATELIMIT_ENABLED = True

    # Bootstrap admin (used by `flask init-db`)
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL') or 'admin@campus.edu'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123456'

    # Attendance sessions
    DEFAULT_SESSION_DURATION_MINUTES = 10
    MAX_SESSION_DURATION_MINUTES = 240

    # Face matching through the AI gateway
    AI_GATEWAY_URL = os.environ.get('AI_GATEWAY_URL') or \
        'https://ai.gateway.lovable.dev/v1/chat/completions'
    AI_GATEWAY_API_KEY = os.environ.get('AI_GATEWAY_API_KEY') or os.environ.get('LOVABLE_API_KEY')
    AI_FACE_MODEL = os.environ.get('AI_FACE_MODEL') or 'google/gemini-2.5-flash'
    AI_REQUEST_TIMEOUT_SECONDS = int(os.environ.get('AI_REQUEST_TIMEOUT_SECONDS', 30))
    FACE_MATCH_THRESHOLD = 0.65

    # Request size (captured images arrive as data URLs)
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE') or 'logs/app.log'
