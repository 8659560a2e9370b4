"""Product embeddings and the HNSW index used for similarity search.

The index is not part of the declarative metadata: it is plain DDL executed
by a migration revision, and it only exists on PostgreSQL with pgvector.
Every statement is idempotent so a partially applied revision can be re-run.
"""
import logging
from typing import List

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON

logger = logging.getLogger(__name__)

EMBEDDING_DIMENSIONS = 1536
HNSW_INDEX_NAME = "product_embedding_idx"

VECTOR_EXTENSION_DDL = "CREATE EXTENSION IF NOT EXISTS vector"
HNSW_INDEX_DDL = (
    f"CREATE INDEX IF NOT EXISTS {HNSW_INDEX_NAME} "
    "ON product USING hnsw (embedding vector_cosine_ops)"
)


def embedding_type(dimensions: int = EMBEDDING_DIMENSIONS):
    return JSON().with_variant(Vector(dimensions), "postgresql")


def vector_extension_ddl(dialect_name: str) -> List[str]:
    if dialect_name != "postgresql":
        logger.info("no vector extension on %s", dialect_name)
        return []
    return [VECTOR_EXTENSION_DDL]


def vector_index_ddl(dialect_name: str) -> List[str]:
    """Statements creating the cosine-distance HNSW index over product.embedding."""
    if dialect_name != "postgresql":
        logger.info("skipping %s on %s", HNSW_INDEX_NAME, dialect_name)
        return []
    return [VECTOR_EXTENSION_DDL, HNSW_INDEX_DDL]
