"""HNSW cosine index over product.embedding

Revision ID: 0002
Revises: 0001
Create Date: 2024-06-03 18:44:52
"""
from alembic import op

from storefront.vector import HNSW_INDEX_NAME, vector_index_ddl

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # No-op outside PostgreSQL
    for statement in vector_index_ddl(op.get_context().dialect.name):
        op.execute(statement)


def downgrade() -> None:
    if op.get_context().dialect.name == "postgresql":
        op.execute(f"DROP INDEX IF EXISTS {HNSW_INDEX_NAME}")
