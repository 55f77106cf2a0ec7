"""Health check endpoint."""

import structlog
from fastapi import APIRouter, Request

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.get("/health")
async def health(request: Request):
    """
    Report liveness and OpenAI reachability.

    The CRM works without OpenAI (analysis falls back), so an unreachable
    provider reports "degraded" rather than failing the check.
    """
    openai = request.app.state.openai
    if openai is None:
        return {"status": "ok", "analysis_enabled": False}

    check = await openai.health_check()
    if not check["healthy"]:
        logger.warning("health.openai_unreachable", error=check.get("error"))
    return {
        "status": "ok" if check["healthy"] else "degraded",
        "analysis_enabled": True,
        "openai": check,
    }
