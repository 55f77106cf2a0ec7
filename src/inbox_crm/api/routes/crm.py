"""Contacts, deals, pipeline board and analytics endpoints."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from inbox_crm.controller import CrmController
from inbox_crm.models.crm import Contact, Deal, Money, PipelineStage
from inbox_crm.pipeline.analytics import deals_by_stage, stage_values
from inbox_crm.utils import new_contact_id, new_deal_id

router = APIRouter()


class ContactCreate(BaseModel):
    name: str
    email: str
    company: str = ""
    tags: list[str] = Field(default_factory=list)
    avatar: str | None = None
    phone: str | None = None


class DealCreate(BaseModel):
    title: str
    value: Money = Field(default=Decimal("0"), ge=0)
    stage: PipelineStage = PipelineStage.LEAD
    contact_id: str
    notes: str = ""
    expected_close_date: date | None = None


class StageMove(BaseModel):
    stage: PipelineStage


@router.get("/contacts")
async def list_contacts(request: Request):
    return {"contacts": request.app.state.controller.store.contacts}


@router.post("/contacts", status_code=201)
async def add_contact(payload: ContactCreate, request: Request):
    controller: CrmController = request.app.state.controller
    contact = Contact(id=new_contact_id(), **payload.model_dump())
    return controller.add_contact(contact)


@router.get("/deals")
async def list_deals(request: Request):
    return {"deals": request.app.state.controller.store.deals}


@router.post("/deals", status_code=201)
async def add_deal(payload: DealCreate, request: Request):
    controller: CrmController = request.app.state.controller
    deal = Deal(id=new_deal_id(), **payload.model_dump())
    return controller.add_deal(deal)


@router.patch("/deals/{deal_id}/stage")
async def move_deal(deal_id: str, payload: StageMove, request: Request):
    """Drop a deal on a new stage. Unknown ids are a no-op, not an error."""
    controller: CrmController = request.app.state.controller
    deal = controller.move_deal(deal_id, payload.stage)
    return {"moved": deal is not None, "deal": deal}


@router.get("/pipeline")
async def pipeline_board(request: Request):
    """Deals grouped by stage, in display order, with per-stage totals."""
    controller: CrmController = request.app.state.controller
    deals = controller.store.deals
    contacts = {c.id: c for c in controller.store.contacts}
    values = stage_values(deals)
    return {
        "stages": [
            {
                "stage": stage.value,
                "value": values[stage],
                "deals": [
                    {
                        "deal": deal,
                        "contact_name": contacts[deal.contact_id].name
                        if deal.contact_id in contacts
                        else None,
                    }
                    for deal in stage_deals
                ],
            }
            for stage, stage_deals in deals_by_stage(deals).items()
        ]
    }


@router.get("/analytics")
async def analytics(request: Request):
    return request.app.state.controller.pipeline_summary().to_dict()
