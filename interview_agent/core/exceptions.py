"""
Custom exceptions for the interview table generator.

This module defines a hierarchy of exceptions to provide specific error handling
and better error messages throughout the application.

Completion errors (RemoteError, TransportError, ParseError) never leave the
completion client: they are logged there and turned into a ``None`` result.
Stage errors (StageTimeoutError, StageFailedError) reach the pipeline caller.
"""
import logging
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class CompletionError(AppError):
    """Base for failures of a single completion request."""
    pass


class RemoteError(CompletionError):
    """The completion endpoint answered with a non-success HTTP status."""
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(
            f"Completion endpoint returned HTTP {status}: {body[:500]}",
            {"status": status, "body": body},
        )


class TransportError(CompletionError):
    """Network or decoding failure before a usable response was obtained."""
    pass


class ParseError(CompletionError):
    """Structured tool-call arguments were not valid JSON."""
    pass


class StageTimeoutError(AppError):
    """Exception raised when an agent call exceeds its deadline."""
    def __init__(self, label: str, duration: float):
        self.label = label
        self.duration = duration
        super().__init__(
            f"{label} timed out after {duration:g}s",
            {"label": label, "duration": duration},
        )


class StageFailedError(AppError):
    """A stage produced no result and the run is configured to fail fast."""
    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"{stage} produced no result", {"stage": stage})


class ResumeReadError(AppError):
    """Exception raised when the resume cannot be validated or read."""
    pass


class ConfigurationError(AppError):
    """Exception raised when configuration is invalid or missing."""
    pass


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, StageTimeoutError):
        status_code = 504
    elif isinstance(exc, StageFailedError):
        status_code = 502
    elif isinstance(exc, ResumeReadError):
        status_code = 400
    else:
        status_code = 500
    logger.error(f"Pipeline error ({type(exc).__name__}): {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_type": type(exc).__name__, **exc.details},
    )
