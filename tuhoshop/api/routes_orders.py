from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from tuhoshop.db import AsyncOrderRepository
from tuhoshop.services.notifier import AdminNotifier

from .common import get_notifier, get_orders
from .schemas import ErrorResponse, OrderCreate, OrderRecord

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/orders",
    status_code=201,
    response_model=OrderRecord,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    orders: AsyncOrderRepository = Depends(get_orders),
    notifier: AdminNotifier = Depends(get_notifier),
):
    """Persist a checkout and notify the shop admin after responding."""
    order = await orders.create_order(**payload.to_row())
    record = OrderRecord.model_validate(order)

    # Runs after the response is sent; never affects the status code
    background_tasks.add_task(notifier.notify_order, record, payload.line_items())

    logger.info("Order #%s accepted from %s", record.id, record.phone)
    return record
