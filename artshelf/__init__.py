from .utils import PROGRESS, QUERY, setup_logging
from .config import settings
from .log_level import LogLevel

__version__ = "0.1.0"

__all__ = [
    'settings',
    'LogLevel',
    'setup_logging',
    'QUERY',
    'PROGRESS',
]
