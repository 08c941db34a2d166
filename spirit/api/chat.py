"""Chat passthrough: forwards a conversation to Spirit's LLM"""

import logging

from fastapi import APIRouter

from spirit.api.deps import ChatServiceDep
from spirit.errors import ErrorKind, error_response
from spirit.schemas import ChatRequest, ChatResponse, ErrorResponse
from spirit.services import ChatServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post(
    "/spirit",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def spirit_chat(body: ChatRequest, chat: ChatServiceDep):
    """Send the caller's messages to Spirit and return its reply."""
    if body.messages is None:
        return error_response(ErrorKind.BAD_REQUEST, "Missing or invalid 'messages' array.")

    try:
        reply = await chat.reply(body.messages)
    except ChatServiceError as e:
        logger.error(f"Spirit connection error: {e}")
        return error_response(ErrorKind.UPSTREAM, "Spirit connection error.")

    return ChatResponse(reply=reply.content)
