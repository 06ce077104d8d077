"""
HTTP routes for the account leaderboard.

Query values are taken as raw strings so the service decides what is rejected
and what is silently ignored.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from rankboard.constants import PaginationConstants, ResponseConstants
from rankboard.data_models.leaderboard import RawQueryParams, PageResult, ErrorKind
from rankboard.services.leaderboard import LeaderboardService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leaderboard"])

_ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.STORE: 500,
}


@router.get("/")
async def index():
    return {"message": ResponseConstants.WELCOME_MESSAGE}


@router.get("/accounts")
async def list_accounts(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    class_filter: Optional[str] = Query(None, alias=PaginationConstants.PARAM_CLASS),
    min_score: Optional[str] = Query(None, alias=PaginationConstants.PARAM_MIN_SCORE),
    max_score: Optional[str] = Query(None, alias=PaginationConstants.PARAM_MAX_SCORE),
):
    """Ranked, filtered and paginated account listing."""
    service: LeaderboardService = request.app.state.leaderboard_service

    result = await service.list_accounts(RawQueryParams(
        page=page,
        limit=limit,
        search=search,
        sort=sort,
        order=order,
        class_filter=class_filter,
        min_score=min_score,
        max_score=max_score
    ))

    if isinstance(result, PageResult):
        return Response(
            content=result.payload,
            media_type="application/json",
            headers={ResponseConstants.CACHE_HEADER: "HIT" if result.cache_hit else "MISS"}
        )

    return JSONResponse(status_code=_ERROR_STATUS[result.kind], content={"error": result.message})
