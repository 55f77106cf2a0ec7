"""Inbox endpoints: list, select, analyze, accept suggestion."""

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from inbox_crm.controller import CrmController
from inbox_crm.errors import ConfigurationError, EmailNotFoundError
from inbox_crm.models.extraction import ExtractedDealData

logger = structlog.get_logger(__name__)

router = APIRouter()


class AcceptSuggestionRequest(BaseModel):
    """Optional explicit suggestion; the pending one is used when absent."""

    suggestion: ExtractedDealData | None = None


def _context(controller: CrmController) -> dict:
    """CRM sidebar view of the open email."""
    email = controller.open_email
    return {
        "email": email,
        "contact": controller.active_contact,
        "deals": controller.active_deals,
        "suggestion": controller.pending_suggestion,
        "analyzing": controller.is_analyzing(email.id) if email else False,
    }


@router.get("/emails")
async def list_emails(request: Request):
    return {"emails": request.app.state.controller.store.emails}


@router.get("/context")
async def get_context(request: Request):
    return _context(request.app.state.controller)


@router.post("/emails/{email_id}/select")
async def select_email(email_id: str, request: Request):
    """Open an email and return its CRM context."""
    controller: CrmController = request.app.state.controller
    if controller.select_email(email_id) is None:
        raise HTTPException(status_code=404, detail=f"Email not found: {email_id}")
    return _context(controller)


@router.post("/emails/{email_id}/analyze")
async def analyze_email(email_id: str, request: Request):
    """Run deal analysis on an email; a missing API key is reported as 503."""
    controller: CrmController = request.app.state.controller
    try:
        suggestion = await controller.request_analysis(email_id)
    except EmailNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConfigurationError as e:
        logger.error("analyze.not_configured", email_id=email_id, error=e.message)
        return JSONResponse(
            status_code=503,
            content={"error": e.message, "analysis_enabled": False},
        )

    return {
        "email_id": email_id,
        "suggestion": suggestion,
        "pending": controller.pending_suggestion is suggestion,
    }


@router.post("/suggestions/accept")
async def accept_suggestion(request: Request, body: AcceptSuggestionRequest | None = None):
    """Create a deal (and the sender's contact if needed) from a suggestion."""
    controller: CrmController = request.app.state.controller
    result = controller.accept_suggestion(body.suggestion if body else None)
    if result is None:
        return {"accepted": False, "contact": None, "deal": None, "contact_created": False}
    return {
        "accepted": True,
        "contact": result.contact,
        "deal": result.deal,
        "contact_created": result.contact_created,
    }
