from fastapi import APIRouter, Depends

from devrx.api.dependencies import get_advisor
from devrx.models.ai import AiStatusRead, ChatRequest, ChatResponse
from devrx.services.llm_service import AiAdvisor


router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, advisor: AiAdvisor = Depends(get_advisor)) -> ChatResponse:
    return ChatResponse(response=advisor.generate_assistant_response(payload.message, payload.history))


@router.get("/status", response_model=AiStatusRead)
def ai_status(advisor: AiAdvisor = Depends(get_advisor)) -> AiStatusRead:
    return AiStatusRead(is_available=advisor.available)
