"""
Application Constants

Centralized location for all application constants, organized by domain.
This makes it easy to maintain and update values across the entire application.
"""

# =============================================================================
# API Configuration
# =============================================================================

class APIConfig:
    """API-level configuration constants"""

    API_PREFIX = "/api"
    API_VERSION = "1.0.0"
    API_TITLE = "Poll App API"
    API_DESCRIPTION = """
    Backend for a small polling application.

    ## Features
    - Signup, login and bearer-token authentication
    - Poll creation, editing and deletion by their creators
    - One vote per user per poll, changeable at any time
    - Public voter lists per option
    - Notifications for poll creators when a voter changes their vote
    """

    # CORS Configuration
    DEV_ORIGINS = [
        "http://localhost:3000",  # React dev server
        "http://localhost:5173",  # Vite dev server
    ]
    ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    ALLOWED_HEADERS = ["Authorization", "Content-Type"]


# =============================================================================
# Authentication & Security
# =============================================================================

class AuthConfig:
    """Authentication and security constants"""

    # JWT Configuration
    ACCESS_TOKEN_EXPIRE_HOURS = 24
    ALGORITHM = "HS256"

    # bcrypt
    BCRYPT_ROUNDS = 12
    BCRYPT_MAX_PASSWORD_BYTES = 72


# =============================================================================
# Business Logic Limits
# =============================================================================

class BusinessLimits:
    """Business rules and validation constants"""

    MIN_POLL_OPTIONS = 2
    MAX_POLL_TITLE_LENGTH = 200
    MAX_POLL_DESCRIPTION_LENGTH = 1000
    MAX_OPTION_TEXT_LENGTH = 200
    MAX_USERNAME_LENGTH = 50


# =============================================================================
# Notifications
# =============================================================================

class NotificationConfig:
    """Notification types and limits"""

    TYPE_VOTE_CHANGED = "vote_changed"
    LIST_LIMIT = 50
    VOTE_CHANGED_TEMPLATE = '{username} changed their vote on "{title}" from "{previous}" to "{current}"'


# =============================================================================
# Error Messages
# =============================================================================

class ErrorMessages:
    """Standardized error messages"""

    # Authentication errors
    AUTH_HEADER_REQUIRED = "Authorization header required"
    INVALID_TOKEN = "Invalid token"
    USER_NOT_FOUND = "User not found"
    INVALID_CREDENTIALS = "Invalid credentials"

    # Authorization errors
    NOT_AUTHORIZED_UPDATE = "You can only edit your own polls"
    NOT_AUTHORIZED_DELETE = "You can only delete your own polls"

    # Resource errors
    POLL_NOT_FOUND = "Poll not found"
    NOTIFICATION_NOT_FOUND = "Notification not found"

    # Validation errors
    INVALID_REQUEST_BODY = "Invalid request body"
    POLL_REQUIREMENTS = "Title and at least 2 options are required"
    INVALID_OPTION = "Invalid option for this poll"
    DUPLICATE_USER = "Username or email already exists"

    # System errors
    DATABASE_ERROR = "Database operation failed"
    INTERNAL_ERROR = "An unexpected error occurred"


# =============================================================================
# Database Configuration
# =============================================================================

class DatabaseConfig:
    """Database-related constants"""

    DEFAULT_URL = "sqlite:///./poll_app.db"

    # Connection settings (ignored for SQLite)
    POOL_SIZE = 5
    MAX_OVERFLOW = 10
    POOL_TIMEOUT = 30
    POOL_RECYCLE = 3600  # 1 hour


# =============================================================================
# Logging Configuration
# =============================================================================

class LoggingConfig:
    """Logging configuration constants"""

    DEFAULT_LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

