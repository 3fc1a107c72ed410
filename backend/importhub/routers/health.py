from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["Health"])

SERVICE_NAME = "Imports Service"


@router.get("/health")
async def health():
    """Liveness probe; does not touch the database."""
    return {
        "service": SERVICE_NAME,
        "status": "UP",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
