"""
Processor control and read endpoints.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.domain.errors import StoreError
from app.domain.message import MessageResponse
from app.usecases.message_processor import MessageProcessor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/processor")

ACTION_START = "start"
ACTION_STOP = "stop"
DEFAULT_SENT_MESSAGES_LIMIT = "10"
# Largest limit accepted by /sent-messages; larger values fit no SQLite INTEGER
MAX_SENT_MESSAGES_LIMIT = 1000


class SuccessResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class ProcessorStatusResponse(BaseModel):
    running: bool
    next_run: Optional[str] = None


def get_message_processor(request: Request) -> MessageProcessor:
    """Processor instance created during application startup."""
    return request.app.state.message_processor


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error).model_dump())


@router.get(
    "/sent-messages",
    response_model=List[MessageResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_sent_messages(
    limit: str = DEFAULT_SENT_MESSAGES_LIMIT,
    processor: MessageProcessor = Depends(get_message_processor),
):
    """Get messages that have already been sent, up to `limit`."""
    try:
        limit_value = int(limit)
    except ValueError:
        return error_response(400, "invalid limit parameter")

    if limit_value < 1 or limit_value > MAX_SENT_MESSAGES_LIMIT:
        return error_response(400, "invalid limit parameter")

    try:
        messages = await processor.get_sent_messages(limit_value)
    except StoreError as e:
        logger.error(f"Failed to read sent messages: {e}")
        return error_response(500, str(e))

    if not messages:
        return error_response(404, "no sent messages found")

    return [MessageResponse.model_validate(m) for m in messages]


@router.get("/status", response_model=ProcessorStatusResponse)
async def processor_status(processor: MessageProcessor = Depends(get_message_processor)):
    """Get processor state and the next scheduled pass."""
    next_run = processor.next_run_time
    return ProcessorStatusResponse(
        running=processor.is_running,
        next_run=str(next_run) if next_run else None,
    )


@router.post(
    "/{action}",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
)
async def start_stop_processor(
    action: str,
    processor: MessageProcessor = Depends(get_message_processor),
):
    """Start or stop the message processor."""
    if action == ACTION_START:
        processor.start()
        return SuccessResponse(message="message processor started")

    if action == ACTION_STOP:
        processor.stop()
        return SuccessResponse(message="message processor stopped")

    return error_response(400, "invalid action, use 'start' or 'stop'")
