"""
Runtime configuration, read from the environment (.env is loaded first).
"""
import os

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Persistence
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./postcraft.db")
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = "postgresql://" + DATABASE_URL[10:]
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").strip().lower()  # "sql" or "json"
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))

# Sessions
JWT_SECRET = os.getenv("JWT_SECRET", "fallback-secret-change-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "7"))
COOKIE_NAME = os.getenv("COOKIE_NAME", "auth-token")

# Text generation model
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "").strip()
GROQ_API_KEY_PLACEHOLDER = "your_groq_api_key_here"
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")

# Razorpay (one-time Pro upgrade)
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "").strip()
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "").strip()
RAZORPAY_BASE_URL = os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1").rstrip("/")
PRO_AMOUNT_PAISE = int(os.getenv("PRO_AMOUNT_PAISE", "49900"))  # ₹499
PRO_CURRENCY = os.getenv("PRO_CURRENCY", "INR")

FRONTEND_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "FRONTEND_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]
