"""
Document pipeline ORM models.

documents 1-N chunks 1-1 embeddings; documents 1-1 summaries. Chunk
position is stored in the "ord" column since INDEX is reserved in SQL.

Dependencies: sqlalchemy, pgvector, docagents.boundary.db.base
System role: Relational schema of the document store
"""

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from docagents.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docagents.models.document import DocumentStatus


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Uploaded document and its lifecycle status.

    Attributes:
        id: UUID primary key
        filename: Original filename
        status: processing, ready or failed
    """

    __tablename__ = "documents"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(
            DocumentStatus,
            native_enum=False,
            length=20,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=DocumentStatus.PROCESSING,
    )


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """Token window of a document."""

    __tablename__ = "chunks"
    __table_args__ = (Index("ix_chunks_document_ord", "document_id", "ord"),)

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    ord: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    token_count: Mapped[int] = mapped_column(Integer, nullable=False)


class SummaryModel(Base, TimestampMixin):
    """Summary and key points of a document; one row per document."""

    __tablename__ = "summaries"

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    key_points: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)


class EmbeddingModel(Base, TimestampMixin):
    """Vector of one chunk and the model that produced it."""

    __tablename__ = "embeddings"

    chunk_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chunks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    vector = mapped_column(Vector(), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
