import os

# ======================
# CONFIG
# ======================


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Shared with the identity provider that mints the bearer tokens
SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey_change_this")  # <-- change in production
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))  # 1 day

SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./faculty_reviews.db")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Moderation queues. Everything is published immediately unless switched on.
FACULTY_REQUIRE_APPROVAL = _env_flag("FACULTY_REQUIRE_APPROVAL")
REVIEWS_REQUIRE_APPROVAL = _env_flag("REVIEWS_REQUIRE_APPROVAL")
COMMENTS_REQUIRE_APPROVAL = _env_flag("COMMENTS_REQUIRE_APPROVAL")

# ======================
# POINTS & LIMITS
# ======================

FACULTY_POINTS = 20
REVIEW_POINTS = 10
COMMENT_POINTS = 5

REVIEW_MAX_LENGTH = 2500
COMMENT_MAX_LENGTH = 1000

TOP_RATED_THRESHOLD = 3.5
BLACKLIST_THRESHOLD = 2.0

LEADERBOARD_SIZE = 5
