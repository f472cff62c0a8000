"""
Command-line entry point.

    interview-table resume.txt --job-description "..." --role "Frontend Developer"

The table is printed to stdout as JSON; diagnostics go to stderr and the log file.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from interview_agent.core.config import PipelineConfig, settings
from interview_agent.core.exceptions import AppError
from interview_agent.core.logger import setup_logger
from interview_agent.services.pipeline.file_validator import FileValidator
from interview_agent.services.pipeline.interview_pipeline import InterviewPipeline

logger = logging.getLogger("interview_agent.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interview-table",
        description="Generate an interview question table from a resume and a job description.",
    )
    parser.add_argument("resume", help="Path to the resume text (.txt OCR output) or PDF")
    jd = parser.add_mutually_exclusive_group(required=True)
    jd.add_argument("--job-description", help="Job description text")
    jd.add_argument("--job-description-file", help="File containing the job description")
    parser.add_argument("--role", required=True, help="Job role title for the table")
    parser.add_argument("--policy", choices=["best_effort", "fail_fast"], default=None,
                        help="Failure policy (default: FAILURE_POLICY setting)")
    parser.add_argument("--no-structured", action="store_true",
                        help="Ask for free text instead of tool calls")
    parser.add_argument("--delay", type=float, default=None, help="Pause between agent calls, in seconds")
    parser.add_argument("--timeout", type=float, default=None, help="Deadline per agent call, in seconds")
    parser.add_argument("--endpoint", default=None, help="Completion endpoint URL")
    return parser


def _job_description(args: argparse.Namespace) -> str:
    if args.job_description_file:
        return Path(args.job_description_file).read_text(encoding="utf-8")
    return args.job_description


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger()

    config = PipelineConfig.from_settings(
        settings,
        failure_policy=args.policy,
        structured_output=False if args.no_structured else None,
        stage_delay=args.delay,
        agent_timeout=args.timeout,
        endpoint=args.endpoint,
    )

    try:
        FileValidator(max_size_mb=settings.MAX_FILE_SIZE_MB).validate(args.resume)
        pipeline = InterviewPipeline(config)
        result = asyncio.run(pipeline.run(args.resume, _job_description(args), args.role))
    except AppError as e:
        logger.error(f"Pipeline failed: {e.message}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read job description: {e}")
        return 1

    print(result.table.to_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
