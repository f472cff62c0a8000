"""
The five interview agents.

Each agent builds a prompt from typed inputs, sends it through the
AgentInvoker and turns the answer into a schema object. An agent returns
None when the completion failed or the answer could not be interpreted; it
never retries.
"""
from __future__ import annotations
import logging
from typing import Any, Optional

from interview_agent.core.config import PipelineConfig
from interview_agent.core.prompts import (
    general_questions_prompt,
    mismatch_prompt,
    resume_extraction_prompt,
    resume_questions_prompt,
    role_questions_prompt,
)
from interview_agent.schemas.interview import (
    ChatMessage,
    CompletionRequest,
    MismatchNote,
    QuestionSet,
    ResumeProfile,
    ToolSpec,
)
from interview_agent.services.pipeline.completion_client import CompletionClient, CompletionResult
from interview_agent.services.pipeline.llm_parser import parse_llm_response

logger = logging.getLogger(__name__)


# --- Tool schemas ---

_QUESTION_ITEMS = {
    "type": "object",
    "properties": {
        "question": {"type": "string"},
        "importance": {"type": "string", "enum": ["High", "Medium", "Low"]},
        "weightage": {"type": "number"},
    },
    "required": ["question", "importance", "weightage"],
}


def _question_tool(name: str, description: str) -> ToolSpec:
    return ToolSpec(
        name=name,
        description=description,
        parameters={
            "type": "object",
            "properties": {"questions": {"type": "array", "items": _QUESTION_ITEMS}},
            "required": ["questions"],
        },
    )


RESUME_TOOL = ToolSpec(
    name="extract_resume_info",
    description="Extracts key information from a resume text.",
    parameters={
        "type": "object",
        "properties": {
            "technologies": {"type": "string"},
            "strengths": {"type": "string"},
            "domain": {"type": "string"},
            "summary": {"type": "string"},
        },
        "required": ["technologies", "domain", "summary"],
    },
)

MISMATCH_TOOL = ToolSpec(
    name="detect_mismatch",
    description="Checks for role mismatch between resume and job description.",
    parameters={
        "type": "object",
        "properties": {
            "mismatchNote": {"type": "string", "description": "Summary of mismatch if any"},
        },
        "required": ["mismatchNote"],
    },
)

GENERAL_QUESTIONS_TOOL = _question_tool(
    "generate_general_questions", "Generates general interview questions."
)
ROLE_QUESTIONS_TOOL = _question_tool(
    "generate_role_questions", "Generates role-specific interview questions."
)
RESUME_QUESTIONS_TOOL = _question_tool(
    "generate_resume_questions", "Generates questions from resume projects or tech stack."
)


class AgentInvoker:
    """
    Single entry point the agents use to talk to the model.

    With ``structured_output`` enabled the tool schema is sent and tool-call
    arguments come back as a mapping; otherwise the tool is dropped and the
    free-text answer is returned.
    """

    def __init__(self, client: CompletionClient, config: PipelineConfig):
        self.client = client
        self.config = config

    @property
    def structured(self) -> bool:
        return self.config.structured_output

    def build_request(self, prompt: str, tool: Optional[ToolSpec] = None) -> CompletionRequest:
        return CompletionRequest(
            model=self.config.model,
            messages=[ChatMessage(role="user", content=prompt)],
            tool=tool if self.structured else None,
            seed=self.config.seed,
        )

    async def invoke(self, prompt: str, tool: Optional[ToolSpec] = None) -> Optional[CompletionResult]:
        return await self.client.acomplete(self.build_request(prompt, tool))


def _preview(value: Any, limit: int = 200) -> str:
    text = str(value)
    return text if len(text) <= limit else f"{text[:limit]}..."


class InterviewAgents:
    """Prompt construction and answer interpretation for each pipeline stage."""

    def __init__(self, invoker: AgentInvoker):
        self.invoker = invoker

    @property
    def config(self) -> PipelineConfig:
        return self.invoker.config

    async def extract_resume_details(self, resume_text: str) -> Optional[ResumeProfile]:
        logger.info("Agent 1: Extracting resume info...")
        structured = self.invoker.structured
        result = await self.invoker.invoke(
            resume_extraction_prompt(resume_text, structured=structured),
            RESUME_TOOL,
        )
        if result is None:
            return None

        profile = parse_llm_response(result, ResumeProfile)
        if profile is None and isinstance(result, str) and result.strip():
            # Degraded mode: the whole answer stands in for the summary
            logger.warning("Resume details returned as free text; using it as the summary")
            profile = ResumeProfile(technologies="", domain="", summary=result.strip())
        return profile

    async def detect_mismatch(self, resume_summary: str, job_description: str) -> Optional[MismatchNote]:
        logger.info("Agent 2: Detecting mismatch...")
        result = await self.invoker.invoke(
            mismatch_prompt(resume_summary, job_description),
            MISMATCH_TOOL,
        )
        if isinstance(result, dict):
            return parse_llm_response(result, MismatchNote)
        if not isinstance(result, str):
            return None

        text = result.strip()
        if not text:
            return None
        return parse_llm_response(text, MismatchNote) if text.startswith("{") else MismatchNote(mismatch_note=text)

    async def get_general_questions(self) -> Optional[QuestionSet]:
        logger.info("Agent 3: Generating general questions...")
        return await self._questions(
            general_questions_prompt(
                self.config.general_question_count,
                structured=self.invoker.structured,
            ),
            GENERAL_QUESTIONS_TOOL,
        )

    async def get_role_specific_questions(self, job_description: str) -> Optional[QuestionSet]:
        logger.info("Agent 4: Creating role-specific questions...")
        return await self._questions(
            role_questions_prompt(
                job_description,
                self.config.role_question_count,
                structured=self.invoker.structured,
            ),
            ROLE_QUESTIONS_TOOL,
        )

    async def get_resume_based_questions(self, resume_summary: str) -> Optional[QuestionSet]:
        logger.info("Agent 5: Generating resume-based questions...")
        return await self._questions(
            resume_questions_prompt(
                resume_summary,
                self.config.resume_question_min,
                self.config.resume_question_max,
                structured=self.invoker.structured,
            ),
            RESUME_QUESTIONS_TOOL,
        )

    async def _questions(self, prompt: str, tool: ToolSpec) -> Optional[QuestionSet]:
        result = await self.invoker.invoke(prompt, tool)
        if result is None:
            return None
        questions = parse_llm_response(result, QuestionSet, list_key="questions")
        if questions is None:
            logger.warning(f"[{tool.name}] Answer did not contain a question list: {_preview(result)}")
        return questions
