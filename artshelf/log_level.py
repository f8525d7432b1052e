from enum import Enum

class LogLevel(str, Enum):
    """Log level settings for application"""
    NONE = "none"           # No logging
    ERRORS_ONLY = "errors"  # Only log errors
    PROGRESS = "progress"   # Startup and request summaries
    QUERY = "query"         # Summaries + assembled SQL
    DEBUG = "debug"         # All logging including debug
