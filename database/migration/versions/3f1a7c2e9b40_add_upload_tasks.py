"""Add upload tasks table

Revision ID: 3f1a7c2e9b40
Revises: 
Create Date: 2026-09-28 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1a7c2e9b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "upload_tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("uploaded_by", sa.Uuid(), nullable=False),
        sa.Column("object_key", sa.String(), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table("upload_tasks")
