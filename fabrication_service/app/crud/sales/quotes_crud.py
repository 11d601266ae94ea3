# app/crud/sales/quotes_crud.py
import logging
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.helpers.sequence_helper import next_sequence_number
from shared.utils.app_status_code import AppStatusCode
from ...enum.production_enum import OrderStatus, WorkOrderStatus
from ...enum.sales_enum import CONVERTIBLE_QUOTE_STATUSES, LeadStage, QuoteStatus
from ...models.production.orders import Order
from ...models.production.work_orders import WorkOrder
from ...models.sales.quotes import Quote
from ...models.sales.visits import Visit
from ...schemas.sales.quotes_schemas import (
    QuoteConversionResponse,
    QuoteCreate,
    QuoteListResponse,
    QuoteOut,
    QuoteRequest,
)
from ..inventory import stock_ledger_crud as ledger
from ..inventory.bom_formula import to_decimal
from .leads_crud import get_lead_by_id
from .visits_crud import get_visit_by_id

logger = logging.getLogger(__name__)


def get_quotes(db: Session, org_id: UUID, params: QuoteRequest) -> QuoteListResponse:
    base_query = db.query(Quote).filter(Quote.org_id == org_id)

    if params.status and params.status.lower() != "all":
        base_query = base_query.filter(func.upper(Quote.status) == params.status.upper())

    if params.search and params.search.isdigit():
        base_query = base_query.filter(Quote.quote_number == int(params.search))

    total = base_query.count()
    quotes = (
        base_query
        .order_by(Quote.quote_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return QuoteListResponse(quotes=[QuoteOut.model_validate(q) for q in quotes], total=total)


def get_quote_by_id(db: Session, quote_id: UUID, org_id: UUID) -> Optional[Quote]:
    return db.query(Quote).filter(Quote.id == quote_id, Quote.org_id == org_id).first()


def create_quote(db: Session, quote: QuoteCreate, current_user: UserToken) -> Quote:
    org_id = current_user.org_id
    lead = get_lead_by_id(db, quote.lead_id, org_id)
    if not lead:
        return not_found_response("Lead")

    if quote.visit_id and not get_visit_by_id(db, quote.visit_id, org_id):
        return not_found_response("Visit")

    subtotal = to_decimal(quote.subtotal)
    discount = to_decimal(quote.discount_value)
    if discount > subtotal:
        return error_response(
            message="Discount cannot exceed the quote subtotal",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )

    db_quote = Quote(
        **quote.model_dump(exclude={"subtotal", "discount_value"}),
        org_id=org_id,
        quote_number=next_sequence_number(db, Quote.quote_number, Quote.org_id, org_id),
        status=QuoteStatus.DRAFT.value,
        subtotal=subtotal,
        discount_value=discount,
        total=subtotal - discount,
        created_by=current_user.user_id,
    )
    db.add(db_quote)

    if lead.stage not in (LeadStage.NEGOTIATION.value, LeadStage.WON.value):
        lead.stage = LeadStage.QUOTE.value

    db.commit()
    db.refresh(db_quote)
    return db_quote


def _measurement_source(db: Session, quote: Quote) -> Optional[Visit]:
    if quote.visit:
        return quote.visit
    if not quote.lead_id:
        return None
    # fall back to the lead's latest completed visit with measurements
    return (
        db.query(Visit)
        .filter(
            Visit.org_id == quote.org_id,
            Visit.lead_id == quote.lead_id,
            Visit.measurements.isnot(None)
        )
        .order_by(Visit.scheduled_at.desc())
        .first()
    )


# ----------------- Quote -> Order -----------------
def convert_quote_to_order(db: Session, quote_id: UUID, current_user: UserToken) -> QuoteConversionResponse:
    """
    Turn an accepted quote into an order plus its first work order, and hold
    the BOM materials for it.

    Order, work order, reservations and the quote/lead status changes are
    committed together; any failure rolls the whole conversion back.
    """
    org_id = current_user.org_id
    quote = get_quote_by_id(db, quote_id, org_id)
    if not quote:
        return not_found_response("Quote")

    if quote.status not in CONVERTIBLE_QUOTE_STATUSES or quote.order is not None:
        return error_response(
            message=f"Quote {quote.quote_number} cannot be converted (status {quote.status})",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    lead = quote.lead
    if lead is None:
        return error_response(
            message=f"Quote {quote.quote_number} has no lead",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )

    visit = _measurement_source(db, quote)
    measurements = visit.measurements if visit else None
    today = date.today()

    try:
        order = Order(
            org_id=org_id,
            quote_id=quote.id,
            client_id=lead.client_id,
            client_name=lead.client_name,
            order_number=next_sequence_number(db, Order.order_number, Order.org_id, org_id),
            status=OrderStatus.PRODUCTION.value,
            service_type=lead.service_type,
            start_date=today,
            expected_end_date=today + timedelta(days=quote.delivery_time_days)
            if quote.delivery_time_days is not None else None,
            progress=0,
        )
        db.add(order)
        db.flush()

        work_order = WorkOrder(
            org_id=org_id,
            order_id=order.id,
            service_type=lead.service_type,
            status=WorkOrderStatus.CUTTING.value,
            assigned_team=[],
            checklist={},
            measurements=measurements,
        )
        db.add(work_order)
        db.flush()

        reservations = ledger.reserve_for_work_order(db, work_order, measurements, current_user.user_id)

        quote.status = QuoteStatus.APPROVED.value
        lead.stage = LeadStage.WON.value

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Conversion of quote %s failed, rolled back", quote_id)
        raise

    logger.info("Quote %s converted to order %s (work order %s)",
                quote.quote_number, order.order_number, work_order.id)
    return QuoteConversionResponse(
        order_id=order.id,
        order_number=order.order_number,
        work_order_id=work_order.id,
        reservations_created=len(reservations),
    )
