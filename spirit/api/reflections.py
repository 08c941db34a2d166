"""
Reflections: short summaries of conversations with Spirit.

Writing is open to any client; reading the log back is an admin operation.
Every response under /reflections is JSON, including unknown sub-routes.
"""

import logging
from datetime import timezone
from typing import Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from spirit.api.deps import IsAdminDep, ReflectionStoreDep
from spirit.errors import ErrorKind, error_response
from spirit.schemas import (
    ReflectionCreate,
    ReflectionCreatedResponse,
    ReflectionListResponse,
)
from spirit.services import ReflectionStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reflections", tags=["Reflections"])


def _int_or_none(value: Optional[str]) -> Optional[int]:
    """Lenient query integer: anything unparsable falls back to the default."""
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.get("", response_model=ReflectionListResponse)
@router.get("/", response_model=ReflectionListResponse, include_in_schema=False)
async def list_reflections(
    is_admin: IsAdminDep,
    store: ReflectionStoreDep,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    """Newest reflections first. Example: /reflections?limit=25&offset=0"""
    if not is_admin:
        return error_response(ErrorKind.FORBIDDEN, success=False)

    try:
        reflections = await store.recent(_int_or_none(limit), _int_or_none(offset) or 0)
    except ReflectionStoreError as e:
        logger.error(f"[GET /reflections] Error: {e}")
        return error_response(ErrorKind.UPSTREAM, str(e), success=False)

    return ReflectionListResponse(
        count=len(reflections),
        reflections=[r.to_dict() for r in reflections],
    )


@router.post("", response_model=ReflectionCreatedResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "/",
    response_model=ReflectionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_reflection(body: ReflectionCreate, store: ReflectionStoreDep):
    """Log a new reflection. Required: summary. Optional: user, category, sentiment."""
    if not isinstance(body.summary, str) or not body.summary.strip():
        return error_response(
            ErrorKind.BAD_REQUEST, "Missing or invalid 'summary' text.", success=False
        )

    try:
        reflection = await store.log(
            summary=body.summary,
            user=body.user,
            category=body.category,
            sentiment=body.sentiment,
        )
    except ReflectionStoreError as e:
        logger.error(f"[POST /reflections] Error: {e}")
        return error_response(ErrorKind.UPSTREAM, str(e), success=False)

    timestamp = reflection.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return ReflectionCreatedResponse(reflectionId=reflection.id, timestamp=timestamp)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def reflection_route_not_found(path: str, request: Request):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "success": False,
            "message": "Reflection route not found.",
            "path": request.url.path,
        },
    )
