from typing import List

from pydantic import BaseModel, Field


class TagSuggestionSchema(BaseModel):
    tags: List[str] = Field(default_factory=list, description="At most 5 lowercase tag names")
