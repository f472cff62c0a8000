from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Literal, Optional
from dotenv import load_dotenv



# 2. Get the path to the .env file
CONFIG_DIR = Path(__file__).resolve().parent
# Assuming .env is in the project root (two levels up from interview_agent/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)

FailurePolicy = Literal["best_effort", "fail_fast"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )


    DEBUG_MODE: bool = False


    # Completion endpoint (chat/completion style HTTP API)
    COMPLETION_ENDPOINT: str = "https://txtelixpo.vercel.app/agents"
    COMPLETION_MODEL: str = "openai"
    COMPLETION_API_KEY: str = ""
    COMPLETION_SEED: Optional[int] = None

    # Timeout Configuration (seconds)
    AGENT_TIMEOUT_SECONDS: float = 90.0  # Deadline per agent call (Timeout Guard)
    HTTP_TIMEOUT_SECONDS: float = 90.0  # Socket timeout handed to requests, capped at the agent deadline

    # Pipeline Configuration
    STAGE_DELAY_SECONDS: float = 1.0  # Pause between sequential remote calls
    STRUCTURED_OUTPUT: bool = True  # Ask for tool calls instead of free text
    FAILURE_POLICY: FailurePolicy = "best_effort"

    # Requested question counts (requested, not guaranteed)
    GENERAL_QUESTION_COUNT: int = 10
    ROLE_QUESTION_COUNT: int = 20
    RESUME_QUESTION_MIN: int = 5
    RESUME_QUESTION_MAX: int = 10

    # File Upload Limits
    MAX_FILE_SIZE_MB: int = 10  # Maximum resume file size in MB

    # Logging
    LOG_DIR: str = "logs"


class PipelineConfig(BaseModel):
    """
    Explicit configuration handed to the pipeline and the completion client.

    Built once from Settings (or directly in tests) so nothing reads
    global state while a run is in progress.
    """
    endpoint: str
    model: str = "openai"
    api_key: str = ""
    seed: Optional[int] = None
    agent_timeout: float = 90.0
    http_timeout: float = 90.0
    stage_delay: float = 1.0
    structured_output: bool = True
    failure_policy: FailurePolicy = "best_effort"
    general_question_count: int = 10
    role_question_count: int = 20
    resume_question_min: int = 5
    resume_question_max: int = 10

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "PipelineConfig":
        values = {
            "endpoint": settings.COMPLETION_ENDPOINT,
            "model": settings.COMPLETION_MODEL,
            "api_key": settings.COMPLETION_API_KEY,
            "seed": settings.COMPLETION_SEED,
            "agent_timeout": settings.AGENT_TIMEOUT_SECONDS,
            "http_timeout": settings.HTTP_TIMEOUT_SECONDS,
            "stage_delay": settings.STAGE_DELAY_SECONDS,
            "structured_output": settings.STRUCTURED_OUTPUT,
            "failure_policy": settings.FAILURE_POLICY,
            "general_question_count": settings.GENERAL_QUESTION_COUNT,
            "role_question_count": settings.ROLE_QUESTION_COUNT,
            "resume_question_min": settings.RESUME_QUESTION_MIN,
            "resume_question_max": settings.RESUME_QUESTION_MAX,
        }
        # None means "keep the configured value"
        values.update({k: v for k, v in overrides.items() if v is not None})
        # Socket timeout never exceeds the stage deadline
        values["http_timeout"] = min(values["http_timeout"], values["agent_timeout"])
        return cls(**values)


# Initialize settings
settings = Settings()
