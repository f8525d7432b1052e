from pathlib import Path
import logging
from typing import Optional

from .log_level import LogLevel

QUERY = 15  # Between DEBUG (10) and INFO (20)
PROGRESS = 25  # Between INFO (20) and WARNING (30)

logging.addLevelName(QUERY, 'QUERY')
logging.addLevelName(PROGRESS, 'PROGRESS')

# Add convenience methods
def query(self, message, *args, **kwargs):
    self.log(QUERY, message, *args, **kwargs)

def progress(self, message, *args, **kwargs):
    self.log(PROGRESS, message, *args, **kwargs)


logging.Logger.query = query
logging.Logger.progress = progress

LEVEL_MAP = {
    LogLevel.NONE: logging.CRITICAL + 1,
    LogLevel.ERRORS_ONLY: logging.ERROR,
    LogLevel.PROGRESS: PROGRESS,
    LogLevel.QUERY: QUERY,
    LogLevel.DEBUG: logging.DEBUG
}

def setup_logging(log_dir: Path, log_level: LogLevel, component: Optional[str] = None) -> logging.Logger:
    """Configure logging for the application or one of its components.

    Args:
        log_dir: Directory where log files will be stored
        log_level: LogLevel enum specifying logging verbosity
        component: Optional component name (e.g. ``api``) for a dedicated log file

    Returns:
        Logger instance configured for the specified context
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    if component:
        logger = logging.getLogger(f"artshelf.{component}")
        log_file = log_dir / f"{component}.log"
    else:
        logger = logging.getLogger("artshelf")  # Root program logger
        log_file = log_dir / "artshelf.log"

    # Clear any existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Component loggers also reach the program log
    logger.propagate = component is not None

    if log_level != LogLevel.NONE:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
        logger.addHandler(file_handler)

        if component is None:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(
                logging.Formatter('%(levelname)s - %(message)s'))
            logger.addHandler(console_handler)

    logger.setLevel(LEVEL_MAP.get(log_level, logging.INFO))
    return logger


def get_project_root() -> Path:
    """Get the absolute path to the project root directory."""
    return Path(__file__).parent.parent
