from .schemas import TagSuggestionSchema
from .chains import (
    build_suggestion_chain,
    build_assistant_chain,
    build_tag_suggestion_chain,
)

__all__ = [
    "TagSuggestionSchema",
    "build_suggestion_chain",
    "build_assistant_chain",
    "build_tag_suggestion_chain",
]
