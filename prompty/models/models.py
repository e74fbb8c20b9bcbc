import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid, func

from ..database import Base


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)  # Not unique, see get_by_slug
    # Plain text rather than an enum so rows with unknown values still list
    modality = Column(String, nullable=False)
    user_prompt_template = Column(Text, nullable=False)
    expected_output_description = Column(Text, nullable=True)
    preview_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
