from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

from .log_level import LogLevel

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL. Falls back to a SQLite file under data_dir"
    )
    sql_echo: bool = Field(default=False, description="Echo SQL emitted by the engine")

    # Listing
    default_page_size: int = Field(default=24, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    related_fetch_workers: int = Field(
        default=2,
        ge=1,
        description="Threads used to load images and tags of a listing page"
    )

    # HTTP
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    log_level: LogLevel = Field(default=LogLevel.PROGRESS)

    # File System Configuration
    project_root: Optional[Path] = None
    data_dir: Optional[Path] = None
    logs_dir: Optional[Path] = None
    database_path: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    def initialize_paths(self, project_root: Path) -> None:
        """Initialize path configurations based on project root."""
        self.project_root = project_root
        self.data_dir = project_root / 'data'
        self.logs_dir = self.data_dir / 'logs'

        #Setup database
        self.database_path = self.data_dir / 'gallery.db'

        self._ensure_directories()

    def get_database_url(self) -> str:
        '''Resolve the database URL, preferring an explicit DATABASE_URL'''
        if self.database_url:
            return self.database_url
        if self.database_path is None:
            self.initialize_paths(Path.cwd())
        return f"sqlite:///{self.database_path}"

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        for directory in (self.data_dir, self.logs_dir):
            if directory:
                directory.mkdir(parents=True, exist_ok=True)

# Create global settings instance
settings = Settings()
