"""
PostgreSQL document store.

Chunks, summaries and pgvector embeddings in one database. Top-K search
ranks chunk embeddings by cosine distance and reports similarity as
1 - distance, with the parent document summary left-joined in.

Dependencies: sqlalchemy, asyncpg, pgvector
System role: Production persistence layer
"""

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from docagents.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    EmbeddingModel,
    SummaryModel,
)
from docagents.core.exceptions import (
    DocumentNotFoundError,
    IllegalTransitionError,
    SearchError,
    SummaryNotFoundError,
)
from docagents.core.state_machine import INITIAL_STATUS, allowed_predecessors
from docagents.models.document import (
    Chunk,
    Document,
    DocumentStatus,
    Embedding,
    SearchResult,
    Summary,
)

logger = logging.getLogger(__name__)


def _to_document(model: DocumentModel) -> Document:
    return Document(
        id=model.id,
        filename=model.filename,
        status=model.status,
        created_at=model.created_at,
    )


def _to_chunk(model: ChunkModel) -> Chunk:
    return Chunk(
        id=model.id,
        document_id=model.document_id,
        index=model.ord,
        text=model.text,
        token_count=model.token_count,
    )


class PostgresStore:
    """Document store over an async SQLAlchemy session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        """
        Initialize with a session factory.

        Args:
            session_factory: Factory producing one session per operation
            engine: Engine disposed by close(), when owned by the store
        """
        self._session_factory = session_factory
        self._engine = engine

    async def create_document(self, filename: str) -> Document:
        async with self._session_factory() as session:
            try:
                model = DocumentModel(filename=filename, status=INITIAL_STATUS)
                session.add(model)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:create_document - Insert failed",
                    extra={"document_filename": filename, "error": str(e)},
                )
                raise

            logger.info(
                f"{__name__}:create_document - Document created",
                extra={"document_id": str(model.id), "document_filename": filename},
            )
            return _to_document(model)

    async def get_document(self, document_id: uuid.UUID) -> Document:
        async with self._session_factory() as session:
            model = await session.get(DocumentModel, document_id)
            if model is None:
                raise DocumentNotFoundError(str(document_id))
            return _to_document(model)

    async def update_document_status(
        self,
        document_id: uuid.UUID,
        status: DocumentStatus,
    ) -> Document:
        """
        Compare-and-set the document status.

        The UPDATE only matches rows whose current status is a legal
        predecessor of `status`; a miss is resolved into not-found or an
        illegal transition with a follow-up read.
        """
        predecessors = list(allowed_predecessors(status))
        async with self._session_factory() as session:
            try:
                stmt = (
                    update(DocumentModel)
                    .where(
                        DocumentModel.id == document_id,
                        DocumentModel.status.in_(predecessors),
                    )
                    .values(status=status)
                    .returning(DocumentModel)
                )
                model = (await session.execute(stmt)).scalar_one_or_none()
                if model is None:
                    current = await session.scalar(
                        select(DocumentModel.status).where(DocumentModel.id == document_id)
                    )
                    await session.rollback()
                    if current is None:
                        raise DocumentNotFoundError(str(document_id))
                    raise IllegalTransitionError(str(document_id), current.value, status.value)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:update_document_status - Update failed",
                    extra={"document_id": str(document_id), "error": str(e)},
                )
                raise

            logger.info(
                f"{__name__}:update_document_status - Status updated",
                extra={"document_id": str(document_id), "status": status.value},
            )
            return _to_document(model)

    async def save_chunks(
        self,
        document_id: uuid.UUID,
        chunks: Sequence[Chunk],
    ) -> list[Chunk]:
        async with self._session_factory() as session:
            try:
                models = [
                    ChunkModel(
                        id=chunk.id or uuid.uuid4(),
                        document_id=document_id,
                        ord=chunk.index,
                        text=chunk.text,
                        token_count=chunk.token_count,
                    )
                    for chunk in chunks
                ]
                session.add_all(models)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:save_chunks - Insert failed",
                    extra={"document_id": str(document_id), "error": str(e)},
                )
                raise
            return [_to_chunk(model) for model in models]

    async def count_chunks(self, document_id: uuid.UUID) -> int:
        async with self._session_factory() as session:
            count = await session.scalar(
                select(func.count())
                .select_from(ChunkModel)
                .where(ChunkModel.document_id == document_id)
            )
            return int(count or 0)

    async def list_chunks(self, document_id: uuid.UUID) -> list[Chunk]:
        async with self._session_factory() as session:
            result = await session.scalars(
                select(ChunkModel)
                .where(ChunkModel.document_id == document_id)
                .order_by(ChunkModel.ord, ChunkModel.created_at)
            )
            return [_to_chunk(model) for model in result]

    async def save_summary(self, document_id: uuid.UUID, summary: Summary) -> None:
        stmt = insert(SummaryModel).values(
            document_id=document_id,
            summary=summary.summary,
            key_points=list(summary.key_points),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SummaryModel.document_id],
            set_={
                "summary": stmt.excluded.summary,
                "key_points": stmt.excluded.key_points,
                "updated_at": func.now(),
            },
        )
        async with self._session_factory() as session:
            try:
                await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:save_summary - Upsert failed",
                    extra={"document_id": str(document_id), "error": str(e)},
                )
                raise

    async def get_summary(self, document_id: uuid.UUID) -> Summary:
        async with self._session_factory() as session:
            model = await session.get(SummaryModel, document_id)
            if model is None:
                raise SummaryNotFoundError(str(document_id))
            return Summary(
                document_id=model.document_id,
                summary=model.summary,
                key_points=list(model.key_points or []),
            )

    async def save_embeddings(self, embeddings: Sequence[Embedding]) -> None:
        if not embeddings:
            return
        stmt = insert(EmbeddingModel).values(
            [
                {
                    "chunk_id": embedding.chunk_id,
                    "vector": list(embedding.vector),
                    "model": embedding.model,
                }
                for embedding in embeddings
            ]
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[EmbeddingModel.chunk_id],
            set_={
                "vector": stmt.excluded.vector,
                "model": stmt.excluded.model,
                "updated_at": func.now(),
            },
        )
        async with self._session_factory() as session:
            try:
                await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"{__name__}:save_embeddings - Upsert failed",
                    extra={"count": len(embeddings), "error": str(e)},
                )
                raise

    async def top_k(
        self,
        document_ids: Sequence[uuid.UUID],
        vector: Sequence[float],
        k: int,
    ) -> list[SearchResult]:
        """
        Rank chunk embeddings of the given documents by cosine similarity.

        Raises:
            SearchError: Query failed
        """
        if not document_ids or k <= 0:
            return []

        distance = EmbeddingModel.vector.cosine_distance(list(vector)).label("distance")
        stmt = (
            select(ChunkModel, SummaryModel.summary, distance)
            .join(EmbeddingModel, EmbeddingModel.chunk_id == ChunkModel.id)
            .outerjoin(SummaryModel, SummaryModel.document_id == ChunkModel.document_id)
            .where(ChunkModel.document_id.in_(list(document_ids)))
            .order_by(distance)
            .limit(k)
        )
        async with self._session_factory() as session:
            try:
                rows = (await session.execute(stmt)).all()
            except SQLAlchemyError as e:
                raise SearchError("vector search failed", {"error": str(e)}) from e

        return [
            SearchResult(chunk=_to_chunk(chunk), score=1.0 - float(dist), summary=summary)
            for chunk, summary, dist in rows
        ]

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
