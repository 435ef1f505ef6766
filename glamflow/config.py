import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Record store backend: "firestore" for the live Firebase project, "memory" for local runs
STORE_BACKEND = os.getenv("STORE_BACKEND", "firestore").lower()

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

# Remote store timeouts and write retry policy
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))
STORE_WRITE_RETRIES = int(os.getenv("STORE_WRITE_RETRIES", "3"))
STORE_RETRY_BACKOFF_SECONDS = float(os.getenv("STORE_RETRY_BACKOFF_SECONDS", "0.5"))

# Booking identifiers
BOOKING_ID_PREFIX = os.getenv("BOOKING_ID_PREFIX", "GLAM")
BLOCK_ID_PREFIX = os.getenv("BLOCK_ID_PREFIX", "BLK")

# Gemini text generation - optional, booking never depends on it
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta/models"
)
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "15"))

# Rate limiting on public endpoints (Redis settings are read in rate_limiter.py)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Frontend base URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Admin access: Firebase users with the "admin" custom claim, or listed here
ADMIN_EMAILS = {
    e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()
}

# How often the sync layer asks the store to report dead watch streams (0 disables)
WATCH_CHECK_INTERVAL_SECONDS = float(os.getenv("WATCH_CHECK_INTERVAL_SECONDS", "30"))
