"""
Main FastAPI Application Entry Point
Idea Approval Workflow Engine
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import time

from ideaflow.config.settings import settings
from ideaflow.config.database import init_db
from ideaflow.exceptions import (
    AlreadyProcessedError,
    ApprovalTaskNotFoundError,
    InvalidPolicyError,
    WorkflowAlreadyInitializedError,
    WorkflowClosedError,
    WorkflowEngineError,
)
from ideaflow.utils.logger import setup_logger
from ideaflow.middleware.logging_middleware import LoggingMiddleware

# Import routes
from ideaflow.routes import approval

# Setup logger
logger = setup_logger()


ENGINE_ERROR_STATUS = {
    ApprovalTaskNotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyProcessedError: status.HTTP_409_CONFLICT,
    WorkflowClosedError: status.HTTP_409_CONFLICT,
    WorkflowAlreadyInitializedError: status.HTTP_409_CONFLICT,
    InvalidPolicyError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for application startup and shutdown
    """
    logger.info("Starting Idea Approval Workflow Engine...")

    # Create database tables
    try:
        init_db()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {str(e)}")

    logger.info("Application started successfully")

    yield

    logger.info("Shutting down Idea Approval Workflow Engine...")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-level approval workflow for improvement ideas",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


# Exception handlers
@app.exception_handler(WorkflowEngineError)
async def workflow_exception_handler(request: Request, exc: WorkflowEngineError):
    """Map engine errors to HTTP responses"""
    status_code = ENGINE_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(f"Workflow error {exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "code": exc.code,
            "message": exc.message
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors"""
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": "Validation error",
            "errors": [
                {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
                for error in exc.errors()
            ]
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": time.time()
    }


# Include routers
app.include_router(approval.router, prefix="/api/approvals", tags=["Approvals"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ideaflow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
