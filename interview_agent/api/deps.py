from typing import Callable, Optional

from interview_agent.core.config import PipelineConfig, settings
from interview_agent.services.pipeline.file_validator import FileValidator
from interview_agent.services.pipeline.interview_pipeline import InterviewPipeline


def get_pipeline_config() -> PipelineConfig:
    """Configuration for pipelines started through the API."""
    return PipelineConfig.from_settings(settings)


def get_pipeline_factory() -> Callable[..., InterviewPipeline]:
    """
    Dependency for providing a factory to create InterviewPipeline instances.
    This allows deferring creation until the request's correlation id is known.
    """
    config = get_pipeline_config()

    def factory(correlation_id: Optional[str] = None) -> InterviewPipeline:
        return InterviewPipeline(config, correlation_id=correlation_id)
    return factory


def get_file_validator() -> FileValidator:
    return FileValidator(max_size_mb=settings.MAX_FILE_SIZE_MB)
