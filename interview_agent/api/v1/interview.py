import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Callable

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from interview_agent.api.deps import get_file_validator, get_pipeline_factory
from interview_agent.schemas.interview import InterviewTable
from interview_agent.services.pipeline.file_validator import FileValidator
from interview_agent.services.pipeline.interview_pipeline import InterviewPipeline

logger = logging.getLogger(__name__)

interview_router = APIRouter()


@interview_router.get("/health")
async def health():
    return {"status": "ok"}


@interview_router.post("/interview-table", response_model=InterviewTable)
async def create_interview_table(
    resume_file: UploadFile = File(...),
    job_description: str = Form(...),
    job_role: str = Form(...),
    pipeline_factory: Callable[..., InterviewPipeline] = Depends(get_pipeline_factory),
    validator: FileValidator = Depends(get_file_validator),
):
    """
    Build an interview question table from an uploaded resume (.txt or .pdf)
    and a job description.
    """
    if not resume_file.filename:
        raise HTTPException(status_code=400, detail="No resume file provided.")
    if not job_description.strip():
        raise HTTPException(status_code=400, detail="Job description is empty.")

    correlation_id = str(uuid.uuid4())
    suffix = Path(resume_file.filename).suffix.lower()
    fd, temp_path = tempfile.mkstemp(suffix=suffix, prefix="resume_")
    try:
        with os.fdopen(fd, "wb") as buffer:
            shutil.copyfileobj(resume_file.file, buffer)

        # ResumeReadError / stage errors are mapped by the app's exception handlers
        validator.validate(temp_path)
        pipeline = pipeline_factory(correlation_id=correlation_id)
        result = await pipeline.run(temp_path, job_description, job_role)
    finally:
        try:
            os.remove(temp_path)
        except OSError as e:
            logger.warning(f"Could not remove temporary resume file {temp_path}: {e}")

    logger.info(f"Interview table ready ({len(result.table.questions)} questions, correlation_id={correlation_id})")
    return result.table
