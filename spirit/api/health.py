"""Health check & browser landing route"""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/")
async def root() -> dict:
    return {
        "message": "Spirit API is alive 🔥",
        "status": "online",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
