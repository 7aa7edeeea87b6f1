"""Add plagiarism reports table

Revision ID: 8d2b4e6f1a93
Revises: 3f1a7c2e9b40
Create Date: 2026-09-28 12:30:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '8d2b4e6f1a93'
down_revision = '3f1a7c2e9b40'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "plagiarism_reports",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("is_plagiarism", sa.Boolean(), nullable=False),
        sa.Column("plagiarism_percentage", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    # One report per task; a second analysis of the same task fails on insert
    op.create_index(
        'ix_plagiarism_reports_task_id',
        'plagiarism_reports',
        ['task_id'],
        unique=True
    )


def downgrade():
    op.drop_index('ix_plagiarism_reports_task_id', table_name='plagiarism_reports')
    op.drop_table("plagiarism_reports")
