from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session
from typing import Union
from pathlib import Path

from .models import Base

class Database:
    def __init__(self, db_location: Union[str, Path], echo: bool = False):
        """
        Args:
            db_location: SQLAlchemy URL, or a filesystem path to a SQLite database
            echo: Echo emitted SQL through the engine logger
        """
        self.url = self._to_url(db_location)
        self.engine = create_engine(self.url, echo=echo)
        self._SessionFactory = sessionmaker(bind=self.engine)

    @staticmethod
    def _to_url(db_location: Union[str, Path]) -> str:
        if isinstance(db_location, str) and '://' in db_location:
            return db_location
        return f'sqlite:///{db_location}'

    def create_tables(self):
        """Create all tables in the database"""
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        """Drop all tables in the database"""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session"""
        return self._SessionFactory()

    def dispose(self):
        self.engine.dispose()
