import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mockhire.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ✅ CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

# ✅ Points economy
BOOKING_COST = int(os.getenv("BOOKING_COST", "10"))
INTERVIEWER_REWARD = int(os.getenv("INTERVIEWER_REWARD", "1"))
REFUND_HOURS_THRESHOLD = float(os.getenv("REFUND_HOURS_THRESHOLD", "24"))
PARTIAL_REFUND_RATIO = float(os.getenv("PARTIAL_REFUND_RATIO", "0.5"))

# ✅ Rate limiting (login)
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
LOGIN_RATE_WINDOW_SECONDS = int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"))

# ✅ Interviews
VIDEO_LINK_BASE = os.getenv("VIDEO_LINK_BASE", "https://meet.example.com")
