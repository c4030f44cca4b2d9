import os
from dotenv import load_dotenv

load_dotenv()

MODEL_PROVIDER = os.getenv("MODEL_PROVIDER", "gemini").strip().lower()
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# "staged": classify, then reply in a second call. "unified": one call does both.
PIPELINE_MODE = os.getenv("PIPELINE_MODE", "staged").strip().lower()

FIREBASE_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS_FIREBASE")
CONVERSATIONS_COLLECTION = os.getenv("CONVERSATIONS_COLLECTION", "conversations")
USERS_COLLECTION = "users"

# Web config for the Firebase JS SDK on the login page
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY", "")
FIREBASE_AUTH_DOMAIN = os.getenv("FIREBASE_AUTH_DOMAIN", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")

CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-not-for-production")
# Flask's own signed session (used for flash messages) keeps the name "session".
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "__session")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "5"))
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "true").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def as_mapping():
    """Settings in the shape Flask's ``app.config`` expects."""
    return {
        "MODEL_PROVIDER": MODEL_PROVIDER,
        "GEMINI_MODEL": GEMINI_MODEL,
        "GEMINI_API_KEY": GEMINI_API_KEY,
        "OPENAI_MODEL": OPENAI_MODEL,
        "OPENAI_API_KEY": OPENAI_API_KEY,
        "PIPELINE_MODE": PIPELINE_MODE,
        "FIREBASE_CREDENTIALS": FIREBASE_CREDENTIALS,
        "CONVERSATIONS_COLLECTION": CONVERSATIONS_COLLECTION,
        "USERS_COLLECTION": USERS_COLLECTION,
        "FIREBASE_WEB_API_KEY": FIREBASE_WEB_API_KEY,
        "FIREBASE_AUTH_DOMAIN": FIREBASE_AUTH_DOMAIN,
        "FIREBASE_PROJECT_ID": FIREBASE_PROJECT_ID,
        "CORS_ORIGINS": CORS_ORIGINS,
        "SECRET_KEY": SECRET_KEY,
        "SESSION_COOKIE": SESSION_COOKIE,
        "SESSION_DAYS": SESSION_DAYS,
        "SESSION_COOKIE_SECURE": SESSION_COOKIE_SECURE,
        "LOG_LEVEL": LOG_LEVEL,
    }
