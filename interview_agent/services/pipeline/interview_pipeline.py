"""
Interview Table Pipeline Orchestrator.

This module runs the five agents strictly one after another:
1. Resume extraction
2. Mismatch detection (needs the resume summary)
3. General questions
4. Role-specific questions (needs the job description)
5. Resume-based questions (needs the resume summary)
and compiles their outputs into an InterviewTable.

Only one remote call is ever in flight. Agents 1 and 3 share no data, but
they stay sequential to keep the endpoint's load predictable. A fixed
pacing delay separates consecutive remote calls.

Failure policy (``PipelineConfig.failure_policy``):
- best_effort: a timed-out or failed stage yields an absent result, stages
  that need it are skipped, and a (possibly partial) table is still built.
- fail_fast: the first timed-out or failed stage aborts the run.
"""
from __future__ import annotations
import asyncio
import logging
import time
import uuid
from typing import Awaitable, Callable, Optional, TypeVar

from interview_agent.core.config import PipelineConfig
from interview_agent.core.exceptions import StageFailedError, StageTimeoutError
from interview_agent.core.logger import log_async_execution_time, set_correlation_id
from interview_agent.schemas.interview import InterviewTable, MismatchNote, QuestionSet, ResumeProfile
from interview_agent.services.pipeline.agents import AgentInvoker, InterviewAgents
from interview_agent.services.pipeline.completion_client import CompletionClient
from interview_agent.services.pipeline.run_metadata import RunMetadata, StageOutcome
from interview_agent.services.pipeline.table_compiler import compile_interview_table
from interview_agent.services.pipeline.timeout_guard import with_timeout
from interview_agent.services.tools.extractors import file_text_extractor

logger = logging.getLogger(__name__)

T = TypeVar("T")

STAGE_EXTRACT = "Agent 1: Resume Extraction"
STAGE_MISMATCH = "Agent 2: Mismatch Detection"
STAGE_GENERAL = "Agent 3: General Questions"
STAGE_ROLE = "Agent 4: Role-Specific Questions"
STAGE_RESUME = "Agent 5: Resume-Based Questions"


class PipelineState:
    """Stage outputs of one run. Each field is written once, by its own stage."""

    def __init__(self):
        self.profile: Optional[ResumeProfile] = None
        self.mismatch: Optional[MismatchNote] = None
        self.general: Optional[QuestionSet] = None
        self.role: Optional[QuestionSet] = None
        self.resume: Optional[QuestionSet] = None

    @property
    def resume_summary(self) -> Optional[str]:
        if self.profile is None or not self.profile.summary.strip():
            return None
        return self.profile.summary

    @property
    def mismatch_note(self) -> str:
        return self.mismatch.mismatch_note if self.mismatch is not None else ""


class PipelineResult:
    """The compiled table plus what happened on the way there."""

    def __init__(self, table: InterviewTable, state: PipelineState, metadata: RunMetadata):
        self.table = table
        self.state = state
        self.metadata = metadata


def _preview(value: object, limit: int = 300) -> str:
    text = repr(value)
    return text if len(text) <= limit else f"{text[:limit]}..."


class InterviewPipeline:
    """
    Orchestrates the interview table pipeline.

    Args:
        config: Endpoint, timeout, pacing, output-mode and failure-policy settings.
        client: Completion client to use (built from ``config`` if omitted).
        correlation_id: Optional id for log correlation (auto-generated if not provided).
    """

    def __init__(
        self,
        config: PipelineConfig,
        client: Optional[CompletionClient] = None,
        correlation_id: Optional[str] = None,
    ):
        self.config = config
        self.client = client or CompletionClient(config)
        self.agents = InterviewAgents(AgentInvoker(self.client, config))
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._calls_made = 0

        logger.info(
            f"InterviewPipeline initialized (policy={config.failure_policy}, "
            f"structured={config.structured_output}, correlation_id={self.correlation_id})"
        )

    @property
    def fail_fast(self) -> bool:
        return self.config.failure_policy == "fail_fast"

    async def run(self, resume_path: str, job_description: str, job_role: str) -> PipelineResult:
        """Read the resume file, then run all stages on its text."""
        set_correlation_id(self.correlation_id)
        logger.info("Starting Interview Agent Pipeline...")
        resume_text = file_text_extractor(resume_path)
        return await self.run_with_text(resume_text, job_description, job_role)

    @log_async_execution_time
    async def run_with_text(self, resume_text: str, job_description: str, job_role: str) -> PipelineResult:
        set_correlation_id(self.correlation_id)
        self._calls_made = 0
        metadata = RunMetadata(self.correlation_id, self.config)
        state = PipelineState()
        agents = self.agents

        try:
            state.profile = await self._run_stage(
                STAGE_EXTRACT, lambda: agents.extract_resume_details(resume_text), metadata
            )

            summary = state.resume_summary
            state.mismatch = await self._run_stage(
                STAGE_MISMATCH,
                (lambda: agents.detect_mismatch(summary, job_description)) if summary else None,
                metadata,
            )

            state.general = await self._run_stage(STAGE_GENERAL, agents.get_general_questions, metadata)

            state.role = await self._run_stage(
                STAGE_ROLE, lambda: agents.get_role_specific_questions(job_description), metadata
            )

            state.resume = await self._run_stage(
                STAGE_RESUME,
                (lambda: agents.get_resume_based_questions(summary)) if summary else None,
                metadata,
            )
        except (StageFailedError, StageTimeoutError):
            metadata.mark_failed()
            logger.error(f"Pipeline aborted: {metadata.to_dict()['errors']}")
            raise

        logger.info("Agent 6: Compiling final interview table...")
        table = compile_interview_table(
            state.general,
            state.role,
            state.resume,
            state.mismatch_note,
            job_role,
        )
        metadata.mark_success()
        logger.info(f"Run summary: {metadata.to_dict()}")
        return PipelineResult(table, state, metadata)

    async def _run_stage(
        self,
        label: str,
        operation: Optional[Callable[[], Awaitable[Optional[T]]]],
        metadata: RunMetadata,
    ) -> Optional[T]:
        """
        Run one stage under the Timeout Guard and apply the failure policy.

        ``operation`` is None when a required input from an earlier stage is
        absent; the stage is then skipped without a remote call.
        """
        if operation is None:
            logger.warning(f"{label}: skipped, required input from an earlier stage is absent")
            metadata.record_stage(label, StageOutcome.SKIPPED)
            return None

        await self._pace()
        self._calls_made += 1
        start_time = time.perf_counter()

        try:
            result = await with_timeout(operation(), self.config.agent_timeout, label)
        except StageTimeoutError as e:
            metadata.record_stage(label, StageOutcome.TIMEOUT, time.perf_counter() - start_time)
            metadata.add_error(label, e.message)
            if self.fail_fast:
                raise
            logger.warning(f"{label}: treating timeout as an absent result")
            return None

        duration = time.perf_counter() - start_time
        if result is None:
            metadata.record_stage(label, StageOutcome.ABSENT, duration)
            metadata.add_error(label, "no result")
            logger.warning(f"{label}: no result after {duration:.2f}s")
            if self.fail_fast:
                raise StageFailedError(label)
            return None

        metadata.record_stage(label, StageOutcome.OK, duration)
        logger.info(f"{label}: ok in {duration:.2f}s -> {_preview(result)}")
        return result

    async def _pace(self) -> None:
        """Sleep between consecutive remote calls (never before the first)."""
        if self._calls_made and self.config.stage_delay > 0:
            await asyncio.sleep(self.config.stage_delay)
