"""create prompts table

Revision ID: 3f6a1c2b9d10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f6a1c2b9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the prompts table."""
    op.create_table(
        'prompts',
        sa.Column('id', sa.Uuid(), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('modality', sa.String(), nullable=False),
        sa.Column('user_prompt_template', sa.Text(), nullable=False),
        sa.Column('expected_output_description', sa.Text(), nullable=True),
        sa.Column('preview_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_prompts_slug', 'prompts', ['slug'])
    op.create_index('ix_prompts_created_at', 'prompts', ['created_at'])


def downgrade() -> None:
    """Drop the prompts table."""
    op.drop_index('ix_prompts_created_at', table_name='prompts')
    op.drop_index('ix_prompts_slug', table_name='prompts')
    op.drop_table('prompts')
