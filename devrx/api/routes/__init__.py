from fastapi import APIRouter

from . import questions, answers, comments, votes, tags, users, auth, ai

api_router = APIRouter()
api_router.include_router(questions.router)
api_router.include_router(answers.router)
api_router.include_router(comments.router)
api_router.include_router(votes.router)
api_router.include_router(tags.router)
api_router.include_router(users.router)
api_router.include_router(auth.router)
api_router.include_router(ai.router)

__all__ = ["api_router"]
