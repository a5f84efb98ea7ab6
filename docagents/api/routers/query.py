"""
Query API endpoint.

Routes: POST /query

Dependencies: fastapi, docagents.application.services
System role: Question answering HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from docagents.api.deps import get_query_service
from docagents.application.services import QueryService
from docagents.core.exceptions import TransientError
from docagents.models.query import QueryRequest, QueryResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["query"])


@router.post("/query", response_model=QueryResponse)
async def query(
    request: QueryRequest,
    query_service: QueryService = Depends(get_query_service),
) -> QueryResponse:
    """
    Answer a question over the given documents.

    Request bounds (question length, document ids, top_k) are enforced by
    QueryRequest and rejected with 422.

    Raises:
        HTTPException(502): Embedding, search or generation failed
    """
    try:
        return await query_service.query(request)
    except TransientError as e:
        logger.error(
            f"{__name__}:query - Query failed",
            extra={"error": str(e)},
        )
        raise HTTPException(status_code=502, detail=e.message)
