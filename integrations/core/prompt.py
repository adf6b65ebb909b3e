from __future__ import annotations

from typing import Dict, List

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate


SUMMARY_INSTRUCTION = (
    "Summarize the following post from a farming community feed in one or two "
    "short sentences. Keep any concrete numbers, crops, or locations it mentions."
)

SYSTEM_PROMPT = (
    "You are an experienced agronomist answering questions from small farmers "
    "in a community feed. Give practical, specific advice in a friendly tone. "
    "Keep answers under 120 words. If a question needs a soil or lab test to "
    "answer properly, say so and explain what to test for."
)

ADVICE_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        ("human", "{input}"),
    ]
)

_ROLE_BY_TYPE = {
    "system": "system",
    "human": "user",
    "ai": "assistant",
}


def build_summary_prompt(text: str) -> str:
    return f"{SUMMARY_INSTRUCTION}\n\nPost:\n{text.strip()}"


def to_chat_messages(messages: List[BaseMessage]) -> List[Dict[str, str]]:
    """Convert langchain messages into chat-completions message dicts."""
    converted: List[Dict[str, str]] = []
    for message in messages:
        role = _ROLE_BY_TYPE.get(message.type, "user")
        content = message.content if isinstance(message.content, str) else str(message.content)
        if not content:
            continue
        converted.append({"role": role, "content": content})
    return converted


def build_advice_messages(prompt: str) -> List[Dict[str, str]]:
    return to_chat_messages(ADVICE_PROMPT.format_messages(input=prompt.strip()))
