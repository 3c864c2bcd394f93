"""
Finance Assistant Chat
=======================
One assistant turn for the dashboard chatbot. The browser sends the
whole conversation each time; nothing is stored server-side.
"""

import logging

from ramblin.core import prompts
from ramblin.core.coercion import SchemaTag
from ramblin.core.generation import generate
from ramblin.core.result import Err, NormalizedResult, Ok, invalid_input
from ramblin.llm.llm_client import GenerationClient
from ramblin.schemas import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)


def chat_reply(messages: list[ChatMessage], client: GenerationClient) -> NormalizedResult[ChatResponse]:
    """
    Generate the assistant's reply to the latest user message.

    The last message must come from the user; earlier messages are sent
    as history between the system prompt and that message.
    """
    turns = [m for m in messages if m.content.strip()]
    if not turns:
        return invalid_input("Invalid messages format")
    if turns[-1].role != "user":
        return invalid_input("The last message must come from the user")

    history = [{"role": m.role, "content": m.content} for m in turns[:-1]]
    logger.info(f"Chat turn with {len(history)} earlier message(s)")

    result = generate(
        client, prompts.CHAT_TURN, turns[-1].content, SchemaTag.CHAT_REPLY, history=history
    )
    if isinstance(result, Err):
        return result

    return Ok(ChatResponse(content=result.value.content))
