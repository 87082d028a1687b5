from .user import User
from .question import Tag, Question, QuestionTag, AiSuggestion
from .answer import Answer, Comment, Vote

__all__ = [
    "User",
    "Tag",
    "Question",
    "QuestionTag",
    "AiSuggestion",
    "Answer",
    "Comment",
    "Vote",
]
