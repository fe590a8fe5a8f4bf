"""create_submissions

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('submissions',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('assessment_id', sa.String(64), nullable=False),
        sa.Column('client_id', sa.String(64), nullable=False),
        sa.Column('respondent_name', sa.String(200), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='submitted'),
        sa.Column('score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('max_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('passing_score', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_submissions_id', 'submissions', ['id'])
    op.create_index('ix_submissions_assessment_id', 'submissions', ['assessment_id'])
    op.create_index('ix_submissions_client_id', 'submissions', ['client_id'])

    op.create_table('submission_answers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('submission_id', sa.String(64), nullable=False),
        sa.Column('field_id', sa.String(64), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('selected_json', sa.Text(), nullable=True),
        sa.Column('answer_text', sa.Text(), nullable=True),
        sa.Column('is_correct', sa.Boolean(), nullable=True),
        sa.Column('marks_awarded', sa.Float(), nullable=False, server_default='0'),
        sa.Column('max_marks', sa.Float(), nullable=False, server_default='0'),
        sa.Column('manually_graded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['submission_id'], ['submissions.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('submission_id', 'field_id', name='uq_submission_field')
    )
    op.create_index('ix_submission_answers_id', 'submission_answers', ['id'])
    op.create_index('ix_submission_answers_submission_id', 'submission_answers', ['submission_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_submission_answers_submission_id', table_name='submission_answers')
    op.drop_index('ix_submission_answers_id', table_name='submission_answers')
    op.drop_table('submission_answers')
    op.drop_index('ix_submissions_client_id', table_name='submissions')
    op.drop_index('ix_submissions_assessment_id', table_name='submissions')
    op.drop_index('ix_submissions_id', table_name='submissions')
    op.drop_table('submissions')
