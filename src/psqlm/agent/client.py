"""Anthropic Messages API client with streamed output."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import click
import httpx

from psqlm.agent.base import BaseAssistant, Message, Role
from psqlm.agent.prompts import build_fix_prompt, build_system_prompt, clean_sql
from psqlm.errors import APIStatusError, TransportError
from psqlm.schema.types import Schema

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 1024

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def _echo_highlighted(text: str) -> None:
    click.echo(click.style(text, fg="green"), nl=False)


def parse_stream_line(line: str) -> Optional[str]:
    """Extract the text fragment carried by one server-sent-event line.

    Returns None for anything that is not a ``content_block_delta`` with a
    string ``delta.text``: other event types, the ``[DONE]`` sentinel, and
    malformed JSON are all skipped.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    data = line[len(DATA_PREFIX) :].strip()
    if not data or data == DONE_SENTINEL:
        return None

    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        return None

    if not isinstance(event, dict) or event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta")
    if not isinstance(delta, dict):
        return None
    text = delta.get("text")
    return text if isinstance(text, str) else None


class AssistantClient(BaseAssistant):
    """Stateful text-to-SQL assistant backed by Claude.

    Example:
        >>> assistant = AssistantClient(api_key="sk-...")
        >>> sql = asyncio.run(assistant.text_to_sql(schema, "how many users"))
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        base_url: str = API_URL,
        timeout: Optional[float] = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_text: Optional[Callable[[str], None]] = None,
    ):
        """Initialize assistant client.

        Args:
            api_key: Anthropic API key
            model: Model name (defaults to claude-sonnet-4-5-20250929)
            max_tokens: Maximum tokens to generate per reply
            base_url: Messages endpoint URL
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (for testing)
            on_text: Callback receiving each streamed fragment
                (defaults to printing it in green)
        """
        super().__init__()
        self.api_key = api_key
        self.model = model or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.on_text = on_text or _echo_highlighted

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
        }

    def build_request(self, schema: Schema, messages: List[Message]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": build_system_prompt(schema),
            "messages": [m.to_dict() for m in messages],
            "stream": True,
        }

    def build_messages(self, question: str) -> List[Message]:
        """History turns followed by the new question."""
        messages = self.history.to_messages()
        messages.append(Message(Role.USER, question))
        return messages

    async def stream_response(self, request: Dict[str, Any]) -> str:
        """POST a streaming request, echo fragments, return cleaned SQL.

        Raises:
            APIStatusError: If the API answers with a non-2xx status
            TransportError: If sending or reading the stream fails
        """
        self.logger.debug(
            f"Requesting {self.model} with {len(request['messages'])} messages"
        )
        fragments: List[str] = []

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                async with client.stream(
                    "POST", self.base_url, headers=self._headers(), json=request
                ) as response:
                    if not response.is_success:
                        body = (await response.aread()).decode("utf-8", "replace")
                        raise APIStatusError(response.status_code, body)

                    async for line in response.aiter_lines():
                        text = parse_stream_line(line)
                        if text:
                            self.on_text(text)
                            fragments.append(text)
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to reach assistant API: {e}") from e
        finally:
            if fragments:
                click.echo()

        return clean_sql("".join(fragments))

    async def text_to_sql(self, schema: Schema, question: str) -> str:
        request = self.build_request(schema, self.build_messages(question))
        return await self.stream_response(request)

    async def fix_sql(
        self, schema: Schema, question: str, sql: str, error: str
    ) -> str:
        messages = [
            Message(Role.USER, question),
            Message(Role.ASSISTANT, sql),
            Message(Role.USER, build_fix_prompt(error)),
        ]
        return await self.stream_response(self.build_request(schema, messages))

    def __repr__(self) -> str:
        return f"AssistantClient(model={self.model}, history={len(self.history)})"
