"""
Invoice Splits API - FastAPI router for split previews.

Stateless: the billing collaborator posts an invoice's total and line items
and persists whatever this returns.
"""
from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from typing import Optional

from ..engine.errors import PricingError
from ..engine.invoice_split import calculate_split, percentage_from_amounts
from ..engine.models import InvoiceLineItem

router = APIRouter(prefix="/api/invoices", tags=["invoice-splits"])


# Pydantic models for API
class LineItemIn(BaseModel):
    """One invoice line item."""
    line_item_id: str
    description: str = ""
    total_cents: int


class SplitRequest(BaseModel):
    """Request model for computing a split."""
    total_cents: Optional[int] = None
    strategy: str = "none"
    percentage_to_secondary: Optional[float] = None
    line_items: list[LineItemIn] = []
    line_item_assignments: Optional[dict[str, str]] = None


class SplitDetailOut(BaseModel):
    line_item_id: str
    description: str
    amount_cents: int
    assigned_to: str


class SplitResponse(BaseModel):
    """Response model for a split."""
    strategy: str
    total_cents: int
    agent_amount_cents: int
    secondary_amount_cents: int
    percentage_to_secondary: Optional[float]
    details: list[SplitDetailOut]


class PercentageRequest(BaseModel):
    total_cents: int
    secondary_amount_cents: int


@router.post("/split", response_model=SplitResponse)
async def split_invoice(req: SplitRequest):
    """Compute agent and brokerage amounts for an invoice."""
    try:
        result = calculate_split(
            total_cents=req.total_cents,
            strategy=req.strategy,
            percentage_to_secondary=req.percentage_to_secondary,
            line_items=[InvoiceLineItem(**item.model_dump()) for item in req.line_items],
            line_item_assignments=req.line_item_assignments,
        )
    except PricingError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return jsonable_encoder(result)


@router.post("/split/percentage")
async def split_percentage(req: PercentageRequest):
    """Recover the brokerage percentage of a stored split."""
    try:
        percent = percentage_from_amounts(req.total_cents, req.secondary_amount_cents)
    except PricingError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return {"percentage_to_secondary": percent}
