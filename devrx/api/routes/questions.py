from typing import Callable, List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlmodel import Session

from devrx.api.dependencies import (
    get_advisor,
    get_current_user_id,
    get_session,
    get_session_factory,
)
from devrx.models.answer import AnswerCreate, AnswerRead, CommentView
from devrx.models.question import (
    QuestionCreate,
    QuestionDetail,
    QuestionListRead,
    QuestionRead,
    QuestionUpdate,
    QuestionView,
    TagSuggestRead,
    TagSuggestRequest,
)
from devrx.services.answer_service import AnswerService
from devrx.services.llm_service import AiAdvisor
from devrx.services.query_service import QueryService
from devrx.services.question_service import QuestionService
from devrx.services.suggestion_service import generate_question_suggestion
from devrx.services.tag_service import normalize_tag_names


router = APIRouter(prefix="/api/questions", tags=["questions"])


def get_question_service(session=Depends(get_session)) -> QuestionService:
    return QuestionService(session)


def get_query_service(session=Depends(get_session)) -> QueryService:
    return QueryService(session)


def get_answer_service(session=Depends(get_session)) -> AnswerService:
    return AnswerService(session)


def parse_tag_ids(raw: str | None) -> List[int]:
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="tags must be a comma-separated list of tag ids",
        ) from exc


@router.get("", response_model=QuestionListRead)
def list_questions(
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    sort_by: str = Query(default="newest", alias="sortBy"),
    search: str = "",
    tags: str | None = None,
    service: QueryService = Depends(get_query_service),
) -> QuestionListRead:
    return service.list_questions(
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        tag_ids=parse_tag_ids(tags),
        search_query=search,
    )


@router.post("", response_model=QuestionView, status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    service: QuestionService = Depends(get_question_service),
    query: QueryService = Depends(get_query_service),
    advisor: AiAdvisor = Depends(get_advisor),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> QuestionView:
    question = service.create_question(user_id, payload)
    # Runs after the response is sent; the question transaction is already committed.
    background_tasks.add_task(
        generate_question_suggestion,
        session_factory,
        advisor,
        question.id,
        question.title,
        question.content,
        normalize_tag_names(payload.tags),
    )
    return query.get_question_view(question.id)


@router.post("/suggest-tags", response_model=TagSuggestRead)
def suggest_tags(
    payload: TagSuggestRequest, advisor: AiAdvisor = Depends(get_advisor)
) -> TagSuggestRead:
    if not payload.title or not payload.content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Title and content are required"
        )
    return TagSuggestRead(tags=advisor.suggest_tags(payload.title, payload.content))


@router.get("/{question_id}", response_model=QuestionDetail)
def get_question(
    question_id: int, service: QueryService = Depends(get_query_service)
) -> QuestionDetail:
    return service.get_question_detail(question_id)


@router.put("/{question_id}", response_model=QuestionRead)
def update_question(
    question_id: int,
    payload: QuestionUpdate,
    user_id: str = Depends(get_current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionRead:
    return service.update_question(question_id, user_id, payload)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    user_id: str = Depends(get_current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> None:
    service.delete_question(question_id, user_id)


@router.get("/{question_id}/comments", response_model=List[CommentView])
def list_question_comments(
    question_id: int, service: QueryService = Depends(get_query_service)
) -> List[CommentView]:
    return service.list_question_comments(question_id)


@router.post(
    "/{question_id}/answers", response_model=AnswerRead, status_code=status.HTTP_201_CREATED
)
def create_answer(
    question_id: int,
    payload: AnswerCreate,
    user_id: str = Depends(get_current_user_id),
    service: AnswerService = Depends(get_answer_service),
) -> AnswerRead:
    return service.create_answer(question_id, user_id, payload)
