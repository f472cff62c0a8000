"""
End-to-end tests for the pipeline orchestrator with a scripted or stubbed
completion endpoint.
"""
import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import ScriptedClient, fake_response, structured_answers, tool_call_payload
from interview_agent.core.exceptions import ResumeReadError, StageFailedError, StageTimeoutError
from interview_agent.schemas.interview import QuestionType
from interview_agent.services.pipeline.completion_client import CompletionClient
from interview_agent.services.pipeline.interview_pipeline import (
    STAGE_EXTRACT,
    STAGE_GENERAL,
    STAGE_MISMATCH,
    STAGE_RESUME,
    STAGE_ROLE,
    InterviewPipeline,
)
from interview_agent.services.pipeline.run_metadata import StageOutcome

RESUME = "Skilled in React, 3 years frontend"
JOB = "Hiring backend engineer, Go required"
ROLE = "Backend Engineer"

TOOL_ORDER = [
    "extract_resume_info",
    "detect_mismatch",
    "generate_general_questions",
    "generate_role_questions",
    "generate_resume_questions",
]


def _run(pipeline, resume=RESUME):
    return asyncio.run(pipeline.run_with_text(resume, JOB, ROLE))


def test_successful_run_builds_full_table_in_stage_order(config):
    client = ScriptedClient(config, answers=structured_answers())
    result = _run(InterviewPipeline(config, client=client))
    table = result.table

    assert [r.tool.name for r in client.requests] == TOOL_ORDER
    assert len(table.questions) == 10 + 20 + 6
    assert {q.type for q in table.questions[:10]} == {QuestionType.GENERAL}
    assert {q.type for q in table.questions[10:30]} == {QuestionType.ROLE}
    assert {q.type for q in table.questions[30:]} == {QuestionType.RESUME}
    assert table.role == ROLE
    assert table.note == "Frontend profile applying for a backend role."
    assert result.metadata.status == "success"
    assert all(s["outcome"] == "ok" for s in result.metadata.stages)


def test_summary_threads_into_mismatch_and_resume_prompts(config):
    client = ScriptedClient(config, answers=structured_answers())
    _run(InterviewPipeline(config, client=client), resume="full resume text")

    mismatch_prompt = client.request_for("detect_mismatch").messages[0].content
    resume_prompt = client.request_for("generate_resume_questions").messages[0].content
    role_prompt = client.request_for("generate_role_questions").messages[0].content
    assert RESUME in mismatch_prompt and JOB in mismatch_prompt
    assert RESUME in resume_prompt
    assert JOB in role_prompt
    assert "full resume text" in client.request_for("extract_resume_info").messages[0].content


def test_http_500_on_mismatch_gives_empty_note_under_best_effort(config):
    """The real client is used; only the mismatch call fails at the HTTP level."""
    answers = structured_answers()

    def respond(url, **kwargs):
        name = kwargs["json"]["tools"][0]["function"]["name"]
        if name == "detect_mismatch":
            return fake_response(status=500, text="Internal Server Error")
        return fake_response(payload=tool_call_payload(json.dumps(answers[name])))

    with patch("interview_agent.services.pipeline.completion_client.requests.post", side_effect=respond):
        result = _run(InterviewPipeline(config, client=CompletionClient(config)))

    assert result.table.note == ""
    assert len(result.table.questions) == 36
    assert result.metadata.stage_outcome(STAGE_MISMATCH) is StageOutcome.ABSENT
    assert result.metadata.status == "success"


def test_content_parts_on_mismatch_give_empty_note_under_best_effort(config):
    answers = structured_answers()

    def respond(url, **kwargs):
        name = kwargs["json"]["tools"][0]["function"]["name"]
        if name == "detect_mismatch":
            return fake_response(payload={"choices": [{"message": {"content": [{"type": "text", "text": "fit"}]}}]})
        return fake_response(payload=tool_call_payload(json.dumps(answers[name])))

    with patch("interview_agent.services.pipeline.completion_client.requests.post", side_effect=respond):
        result = _run(InterviewPipeline(config, client=CompletionClient(config)))

    assert result.table.note == ""
    assert len(result.table.questions) == 36
    assert result.metadata.stage_outcome(STAGE_MISMATCH) is StageOutcome.ABSENT


def test_absent_profile_skips_dependent_stages(config):
    answers = structured_answers()
    answers["extract_resume_info"] = None
    client = ScriptedClient(config, answers=answers)

    result = _run(InterviewPipeline(config, client=client))

    assert [r.tool.name for r in client.requests] == ["extract_resume_info", "generate_general_questions",
                                                      "generate_role_questions"]
    assert result.metadata.stage_outcome(STAGE_EXTRACT) is StageOutcome.ABSENT
    assert result.metadata.stage_outcome(STAGE_MISMATCH) is StageOutcome.SKIPPED
    assert result.metadata.stage_outcome(STAGE_RESUME) is StageOutcome.SKIPPED
    assert result.table.note == ""
    assert [q.type for q in result.table.questions].count(QuestionType.RESUME) == 0
    assert len(result.table.questions) == 30


def test_failed_question_stage_leaves_other_sets_intact(config):
    answers = structured_answers()
    answers["generate_role_questions"] = {"not_questions": []}
    result = _run(InterviewPipeline(config, client=ScriptedClient(config, answers=answers)))

    assert len(result.table.questions) == 16
    assert result.metadata.stage_outcome(STAGE_ROLE) is StageOutcome.ABSENT


def test_timeout_is_absence_under_best_effort(make_config):
    config = make_config(agent_timeout=0.1)
    answers = structured_answers()
    answers["generate_general_questions"] = ScriptedClient.HANG
    client = ScriptedClient(config, answers=answers)

    result = _run(InterviewPipeline(config, client=client))

    assert result.metadata.stage_outcome(STAGE_GENERAL) is StageOutcome.TIMEOUT
    assert len(client.requests) == 5
    assert len(result.table.questions) == 26
    assert "timed out" in result.metadata.errors[0]["error"]


def test_timeout_aborts_run_under_fail_fast(make_config):
    config = make_config(agent_timeout=0.1, failure_policy="fail_fast")
    answers = structured_answers()
    answers["detect_mismatch"] = ScriptedClient.HANG
    client = ScriptedClient(config, answers=answers)

    with pytest.raises(StageTimeoutError) as exc_info:
        _run(InterviewPipeline(config, client=client))

    assert exc_info.value.label == STAGE_MISMATCH
    assert len(client.requests) == 2


def test_absent_result_aborts_run_under_fail_fast(make_config):
    config = make_config(failure_policy="fail_fast")
    answers = structured_answers()
    answers["generate_role_questions"] = None
    client = ScriptedClient(config, answers=answers)

    with pytest.raises(StageFailedError) as exc_info:
        _run(InterviewPipeline(config, client=client))

    assert exc_info.value.stage == STAGE_ROLE
    assert len(client.requests) == 4


def test_pacing_delay_between_consecutive_calls(make_config):
    config = make_config(stage_delay=1.0)
    client = ScriptedClient(config, answers=structured_answers())
    sleep = AsyncMock()

    with patch("interview_agent.services.pipeline.interview_pipeline.asyncio.sleep", sleep):
        _run(InterviewPipeline(config, client=client))

    assert sleep.await_count == 4
    sleep.assert_awaited_with(1.0)


def test_text_mode_run_produces_table(make_config):
    config = make_config(structured_output=False)
    questions = {"questions": [{"question": "Q", "importance": "High", "weightage": 5}]}
    client = ScriptedClient(config, text_answers=[
        "Frontend engineer focused on React.",
        "Frontend resume for a backend job.",
        json.dumps(questions),
        "```json\n" + json.dumps(questions) + "\n```",
        json.dumps(questions["questions"]),
    ])

    result = _run(InterviewPipeline(config, client=client))

    assert all(r.tool is None for r in client.requests)
    assert result.table.note == "Frontend resume for a backend job."
    assert [q.type for q in result.table.questions] == [
        QuestionType.GENERAL, QuestionType.ROLE, QuestionType.RESUME
    ]
    assert "Frontend engineer focused on React." in client.prompts()[4]


def test_run_reads_resume_file(config, tmp_path):
    resume_file = tmp_path / "resume_ocr_output.txt"
    resume_file.write_text("OCR resume: React, Tailwind", encoding="utf-8")
    client = ScriptedClient(config, answers=structured_answers())

    asyncio.run(InterviewPipeline(config, client=client).run(str(resume_file), JOB, ROLE))

    assert "OCR resume: React, Tailwind" in client.prompts()[0]


def test_missing_resume_file_raises_before_any_call(config, tmp_path):
    client = ScriptedClient(config, answers=structured_answers())
    with pytest.raises(ResumeReadError):
        asyncio.run(InterviewPipeline(config, client=client).run(str(tmp_path / "missing.txt"), JOB, ROLE))
    assert client.requests == []


def test_correlation_id_recorded_in_metadata(config):
    pipeline = InterviewPipeline(config, client=ScriptedClient(config, answers=structured_answers()),
                                 correlation_id="run-42")
    result = _run(pipeline)
    assert result.metadata.to_dict()["run_id"] == "run-42"
