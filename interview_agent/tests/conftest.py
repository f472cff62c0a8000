"""
Shared fixtures for the interview table tests.

No test talks to the network: the completion client is either scripted
(ScriptedClient) or fed canned ``requests`` responses (fake_response).
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from interview_agent.core.config import PipelineConfig
from interview_agent.schemas.interview import CompletionRequest
from interview_agent.services.pipeline.completion_client import CompletionClient

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

ENDPOINT = "http://completion.test/agents"


def make_questions(prefix: str, count: int, importance: str = "High") -> Dict[str, Any]:
    return {
        "questions": [
            {"question": f"{prefix} question {i}", "importance": importance, "weightage": i}
            for i in range(1, count + 1)
        ]
    }


PROFILE = {
    "technologies": "React, TypeScript",
    "strengths": "UI performance",
    "domain": "frontend",
    "summary": "Skilled in React, 3 years frontend",
}


def structured_answers() -> Dict[str, Any]:
    """Tool name -> decoded tool-call arguments for a fully successful run."""
    return {
        "extract_resume_info": PROFILE,
        "detect_mismatch": {"mismatchNote": "Frontend profile applying for a backend role."},
        "generate_general_questions": make_questions("General", 10),
        "generate_role_questions": make_questions("Role", 20, "Medium"),
        "generate_resume_questions": make_questions("Resume", 6, "Low"),
    }


class ScriptedClient(CompletionClient):
    """
    Completion client answering from a script instead of the network.

    ``answers`` maps a tool name to a result, an exception-free callable
    taking the request, or the special value ``HANG`` (never settles).
    Text-mode requests (no tool) are answered from ``text_answers`` in order.
    """

    HANG = object()

    def __init__(self, config: PipelineConfig, answers: Optional[Dict[str, Any]] = None,
                 text_answers: Optional[List[Any]] = None):
        super().__init__(config)
        self.answers = answers or {}
        self.text_answers = list(text_answers or [])
        self.requests: List[CompletionRequest] = []

    def prompts(self) -> List[str]:
        return [r.messages[0].content for r in self.requests]

    def request_for(self, tool_name: str) -> CompletionRequest:
        return next(r for r in self.requests if r.tool is not None and r.tool.name == tool_name)

    async def acomplete(self, request: CompletionRequest):
        self.requests.append(request)
        if request.tool is None:
            answer = self.text_answers.pop(0) if self.text_answers else None
        else:
            answer = self.answers.get(request.tool.name)
        if answer is ScriptedClient.HANG:
            await asyncio.Event().wait()
        if callable(answer):
            return answer(request)
        return answer


def fake_response(status: int = 200, payload: Any = None, text: str = "",
                  json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = text
    if json_error:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    return response


def tool_call_payload(arguments: str) -> Dict[str, Any]:
    return {
        "choices": [{
            "message": {
                "content": None,
                "tool_calls": [{"type": "function", "function": {"name": "f", "arguments": arguments}}],
            }
        }]
    }


def text_payload(content: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"content": content}}]}


@pytest.fixture
def make_config() -> Callable[..., PipelineConfig]:
    def factory(**overrides) -> PipelineConfig:
        values = {"endpoint": ENDPOINT, "stage_delay": 0.0, "agent_timeout": 5.0}
        values.update(overrides)
        return PipelineConfig(**values)
    return factory


@pytest.fixture
def config(make_config) -> PipelineConfig:
    return make_config()
