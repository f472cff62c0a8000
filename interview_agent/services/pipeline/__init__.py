"""
Interview Table Pipeline Package

Architecture:
- interview_pipeline.py: Stage sequencing, pacing and failure policy
- agents.py: The five prompt + completion agents
- completion_client.py: HTTP calls to the completion endpoint
- timeout_guard.py: Per-call deadline
- table_compiler.py: Deterministic merge into the final table
- llm_parser.py: Recovering JSON from free-text answers
- file_validator.py: Input validation
- run_metadata.py: Per-run stage outcomes
"""

from .interview_pipeline import InterviewPipeline, PipelineResult, PipelineState
from .agents import AgentInvoker, InterviewAgents
from .completion_client import CompletionClient
from .timeout_guard import with_timeout
from .table_compiler import compile_interview_table
from .file_validator import FileValidator
from .llm_parser import parse_llm_response

__all__ = [
    'InterviewPipeline',
    'PipelineResult',
    'PipelineState',
    'AgentInvoker',
    'InterviewAgents',
    'CompletionClient',
    'with_timeout',
    'compile_interview_table',
    'FileValidator',
    'parse_llm_response',
]
