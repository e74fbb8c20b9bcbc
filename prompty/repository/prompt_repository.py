from typing import List, Optional

from ..models.models import Prompt
from ..utils.exceptions import rollback_on_exception
from .base_repository import BaseRepository


class PromptRepository(BaseRepository[Prompt]):
    @rollback_on_exception
    def create(self, prompt: Prompt) -> Prompt:
        self.db.add(prompt)
        self.db.commit()
        self.db.refresh(prompt)
        return prompt

    def get_all(self) -> List[Prompt]:
        return self.db.query(Prompt).order_by(Prompt.created_at.desc()).all()

    def get_by_slug(self, slug: str) -> Optional[Prompt]:
        # Slugs are not unique; the newest prompt wins
        return (
            self.db.query(Prompt)
            .filter(Prompt.slug == slug)
            .order_by(Prompt.created_at.desc())
            .first()
        )
