"""
HTTP client for the chat/completion endpoint.

One call is one POST. Failures never propagate: a non-success status, a
transport problem or malformed tool arguments are logged and reported to
the caller as ``None``, so a failing agent does not take later,
independent agents down with it.
"""
import asyncio
import json
import logging
import time
from typing import Any, Optional, Union

import requests

from interview_agent.core.config import PipelineConfig
from interview_agent.core.exceptions import CompletionError, ParseError, RemoteError, TransportError
from interview_agent.schemas.interview import CompletionRequest

logger = logging.getLogger(__name__)

# Tool-call arguments (decoded mapping) or the free-text answer
CompletionResult = Union[dict[str, Any], str]


class CompletionClient:
    """
    Sends CompletionRequests to the configured endpoint.

    ``complete`` is blocking; ``acomplete`` runs it in a worker thread so the
    pipeline can await it (and race it against the Timeout Guard).
    """

    def __init__(self, config: PipelineConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(
                self.config.endpoint,
                json=payload,
                headers=self._headers(),
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Request to {self.config.endpoint} failed: {e}") from e

        if not response.ok:
            raise RemoteError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Response body is not valid JSON: {e}") from e

    @staticmethod
    def _extract(data: dict[str, Any], structured: bool) -> Optional[CompletionResult]:
        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            message = None
        if not isinstance(message, dict):
            logger.warning("Completion response has no choices[0].message")
            return None

        tool_calls = message.get("tool_calls") if structured else None
        if tool_calls and isinstance(tool_calls, list):
            function = tool_calls[0].get("function") if isinstance(tool_calls[0], dict) else None
            raw_arguments = function.get("arguments") if isinstance(function, dict) else None
            if isinstance(raw_arguments, dict):
                return raw_arguments
            try:
                arguments = json.loads(raw_arguments)
            except (TypeError, json.JSONDecodeError) as e:
                raise ParseError(f"Tool-call arguments are not valid JSON: {e}") from e
            if not isinstance(arguments, dict):
                raise ParseError(f"Tool-call arguments decoded to {type(arguments).__name__}, expected object")
            return arguments

        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise TransportError(f"Message content is {type(content).__name__}, expected text")
        return content

    def complete(self, request: CompletionRequest) -> Optional[CompletionResult]:
        """
        Perform one round trip.

        Returns:
            The decoded tool-call arguments when a tool was declared and the
            model called it, otherwise the message text. None on any failure.
        """
        label = request.tool.name if request.tool else "text"
        start_time = time.perf_counter()
        try:
            data = self._post(request.to_payload())
            result = self._extract(data, structured=request.tool is not None)
        except RemoteError as e:
            logger.error(f"[{label}] Completion API error ({e.status}): {e.body[:500]}")
            return None
        except CompletionError as e:
            logger.error(f"[{label}] Completion request failed: {e.message}")
            return None

        elapsed = time.perf_counter() - start_time
        logger.info(f"[{label}] Completion finished in {elapsed:.2f}s")
        return result

    async def acomplete(self, request: CompletionRequest) -> Optional[CompletionResult]:
        return await asyncio.to_thread(self.complete, request)
