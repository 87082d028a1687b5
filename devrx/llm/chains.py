from __future__ import annotations

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import JsonOutputParser, StrOutputParser
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from devrx.llm.prompts import (
    SUGGESTION_SYSTEM_PROMPT,
    SUGGESTION_HUMAN_PROMPT,
    ASSISTANT_SYSTEM_PROMPT,
    TAG_SUGGESTION_SYSTEM_PROMPT,
    TAG_SUGGESTION_HUMAN_PROMPT,
)
from devrx.llm.schemas import TagSuggestionSchema


def build_suggestion_chain(llm: BaseChatModel):
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", SUGGESTION_SYSTEM_PROMPT),
            ("human", SUGGESTION_HUMAN_PROMPT),
        ]
    )
    return prompt | llm | StrOutputParser()


def build_assistant_chain(llm: BaseChatModel):
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", ASSISTANT_SYSTEM_PROMPT),
            MessagesPlaceholder("history"),
            ("human", "{message}"),
        ]
    )
    return prompt | llm | StrOutputParser()


def build_tag_suggestion_chain(llm: BaseChatModel):
    parser = JsonOutputParser(pydantic_object=TagSuggestionSchema)
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", TAG_SUGGESTION_SYSTEM_PROMPT),
            ("human", TAG_SUGGESTION_HUMAN_PROMPT),
        ]
    )
    chain = prompt | llm | parser
    return chain, parser
