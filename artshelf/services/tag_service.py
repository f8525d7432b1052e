from typing import List, Optional

from ..database import Database
from ..database.repository import TagRepository
from ..schemas import TagResponse

MAX_POPULAR_TAGS = 200


class TagService:
    def __init__(self, db: Database):
        self.db = db

    def get_popular_tags(self, limit: int = 50, min_count: int = 1) -> List[TagResponse]:
        """Tags used by at least ``min_count`` artworks, most used first"""
        limit = min(max(limit, 1), MAX_POPULAR_TAGS)
        min_count = max(min_count, 1)
        with self.db.get_session() as session:
            tags = TagRepository(session).popular(limit, min_count)
            return [TagResponse.model_validate(tag) for tag in tags]

    def search_tags(self, query: str, limit: int = 20) -> List[TagResponse]:
        term = (query or '').strip()
        if not term:
            return []
        with self.db.get_session() as session:
            tags = TagRepository(session).search(term, limit)
            return [TagResponse.model_validate(tag) for tag in tags]

    def get_tag_by_id(self, tag_id: int) -> Optional[TagResponse]:
        with self.db.get_session() as session:
            tag = TagRepository(session).get(tag_id)
            return TagResponse.model_validate(tag) if tag else None
