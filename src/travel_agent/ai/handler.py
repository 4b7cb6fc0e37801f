"""Message handler: validates a message, calls Claude, runs tools, stores the reply."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field

from travel_agent.ai.client import AIClient
from travel_agent.ai.conversation import build_messages
from travel_agent.ai.prompts import system_prompt_for
from travel_agent.ai.tools.base import ToolCall
from travel_agent.core.state import AppState
from travel_agent.core.types import Platform, Role
from travel_agent.log import get_logger, mask_user_id
from travel_agent.utils.validation import validate_chat_message

logger = get_logger(__name__)

UNKNOWN_FUNCTION = "Unknown function"
EMPTY_REPLY = "I'm sorry, I couldn't come up with a response. Could you rephrase your question?"


@dataclass
class ChatReply:
    text: str
    usage: dict[str, int] = field(default_factory=dict)


class MessageHandler:
    """Handles the full flow: message -> history -> Claude -> tools -> reply.

    Shared by the web and Telegram adapters. Telegram gets a shorter history
    window and prompt.
    """

    def __init__(self, ai_client: AIClient, state: AppState):
        self._ai_client = ai_client
        self._state = state

    async def handle_message(self, platform: Platform, user_id: str, raw_text: str) -> ChatReply:
        """Process one inbound message end-to-end.

        Raises MessageValidationError for unusable input and AIClientError when
        the model call fails. Tool failures never raise; they are folded into
        the reply text.
        """
        conv_config = self._state.config.conversation
        text = validate_chat_message(raw_text, max_length=conv_config.max_message_length)

        store = self._state.store
        store.add_message(platform, user_id, Role.USER, text)

        limit = conv_config.telegram_history if platform == Platform.TELEGRAM else conv_config.web_history
        messages = build_messages(store.get_history(platform, user_id, limit=limit))
        tools = [t.to_api_dict() for t in self._state.tools.available_tools()]
        max_tokens = self._state.config.telegram.max_tokens if platform == Platform.TELEGRAM else None

        logger.info(
            "message_received",
            platform=platform.value,
            user=mask_user_id(user_id),
            length=len(text),
            history=len(messages),
            tools=len(tools),
        )
        response = await self._ai_client.chat(
            system=system_prompt_for(platform),
            messages=messages,
            tools=tools or None,
            max_tokens=max_tokens,
        )

        if response.tool_calls:
            reply_text = await self.dispatch_tool_calls(response.tool_calls)
        else:
            reply_text = response.text.strip() or EMPTY_REPLY

        store.add_message(platform, user_id, Role.ASSISTANT, reply_text)
        self._state.metrics.update_active_conversations(len(store))
        logger.info(
            "reply_generated",
            platform=platform.value,
            user=mask_user_id(user_id),
            length=len(reply_text),
            tool_calls=len(response.tool_calls),
        )
        return ChatReply(text=reply_text, usage=response.usage)

    async def dispatch_tool_calls(self, tool_calls: list[ToolCall]) -> str:
        """Run each call through the recovery wrapper and join the results."""
        results: list[str] = []
        for call in tool_calls:
            tool = self._state.tools.get(call.name)
            if tool is None:
                logger.warning("unknown_tool_requested", tool=call.name)
                results.append(UNKNOWN_FUNCTION)
                continue

            logger.info("tool_execute", tool=call.name, call_id=call.id)
            try:
                result = await self._state.recovery.execute_with_retry(
                    tool.service_key, functools.partial(tool.run, call)
                )
            except Exception as e:
                logger.error("tool_call_error", tool=call.name, error=str(e))
                result = f"Error: {e}"
            results.append(result)

        return "\n\n".join(results)
