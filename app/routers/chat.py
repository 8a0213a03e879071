"""Chat router - natural-language questions about the user's goals."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.chat import ChatRequest, ChatResponse
from app.routers.auth import get_current_user_id
from app.services.chat_service import ChatService, ChatUnavailableError, ChatUpstreamError


router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def ask_assistant(
    chat_request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Ask the assistant about goals, streaks or what to do next.

    - Returns 503 if no LLM API key is configured
    - Returns 502 if the LLM provider fails
    """
    service = ChatService(db)
    try:
        answer = await service.ask(user_id=user_id, message=chat_request.message)
    except ChatUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ChatUpstreamError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return ChatResponse(response=answer)
