
from artshelf.config import settings
from artshelf.database import ArtworkRepository, Database
from artshelf.utils import get_project_root, setup_logging

# Initialize paths and database
settings.initialize_paths(get_project_root())
logger = setup_logging(settings.logs_dir, settings.log_level)
db = Database(settings.get_database_url(), echo=settings.sql_echo)

# Create tables
db.create_tables()

# Bring counters in line with whatever rows already exist
with db.get_session() as session:
    ArtworkRepository(session).refresh_counters()

logger.progress(f"Database ready at {db.url}")
