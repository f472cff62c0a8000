import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from interview_agent.api.v1.interview import interview_router
from interview_agent.core.logger import setup_logger
from interview_agent.core.exceptions import (
    AppError,
    app_error_handler,
    global_exception_handler,
    http_exception_handler,
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Setup logger with fresh log file on startup
    setup_logger(clear_log=True)
    logger.info("Application startup: Interview Table Generator")
    yield
    logger.info("Application shutdown")

app = FastAPI(
    title="Interview Table Generator",
    description="Builds interview question tables from a resume and a job description.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include routers
app.include_router(interview_router, prefix="/api/v1", tags=["interview"])
