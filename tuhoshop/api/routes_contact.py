from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from tuhoshop.db import AsyncContactRepository
from tuhoshop.services.notifier import AdminNotifier

from .common import get_contacts, get_notifier
from .schemas import ContactCreate, ErrorResponse, NewsletterCreate, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/contact",
    status_code=201,
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
)
async def submit_contact(
    payload: ContactCreate,
    background_tasks: BackgroundTasks,
    contacts: AsyncContactRepository = Depends(get_contacts),
    notifier: AdminNotifier = Depends(get_notifier),
):
    contact = await contacts.create_contact(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message,
    )
    background_tasks.add_task(notifier.notify_contact, contact)
    logger.info("Contact submission #%s stored", contact.id)
    return SuccessResponse(message="Thông tin liên hệ đã được gửi thành công")


@router.post(
    "/newsletter",
    status_code=201,
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
)
async def subscribe_newsletter(
    payload: NewsletterCreate,
    background_tasks: BackgroundTasks,
    notifier: AdminNotifier = Depends(get_notifier),
):
    # Sign-ups are not stored; the admin chat is the only record
    background_tasks.add_task(notifier.notify_newsletter, payload.email)
    return SuccessResponse(message="Đăng ký nhận tin thành công")
