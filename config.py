import os

# Base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Paths
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
OPEN_BROWSER = os.getenv("OPEN_BROWSER", "1") != "0"
SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))   # idle seconds before a session is dropped
SESSION_CLEANUP_INTERVAL = 300

# OpenAI
MODEL_NAME = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")

# Test settings
DEFAULT_TIME_LIMIT_SECONDS = int(os.getenv("TIME_LIMIT_SECONDS", "10800"))  # 3 hours
TICK_INTERVAL_SECONDS = 1.0
QUESTION_COUNT_CHOICES = (5, 10, 15, 20, 25, 30)
DEFAULT_QUESTION_COUNT = 10

# Uploads
MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5 MB
