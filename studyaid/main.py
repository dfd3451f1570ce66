"""
Main FastAPI application
Web client service for the StudyAid study platform
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from studyaid.config import settings
from studyaid.exceptions import NotAuthenticated, RemoteAPIError, ValidationFailure
from studyaid.api import admin, ai, api_keys, auth, flashcards, lectures, progress, quizzes

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Web client for lecture uploads, AI-generated study material, flashcard review and quizzes",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""

    start_time = time.time()

    # Process request
    response = await call_next(request)

    # Calculate duration
    duration = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration:.3f}s"
    )

    return response


# Client-side validation errors
@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    """Input rejected before any remote call"""

    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": exc.message
        }
    )


# Remote API failures
@app.exception_handler(RemoteAPIError)
async def remote_error_handler(request: Request, exc: RemoteAPIError):
    """Surface the server's message (or the operation's generic one) for retry"""

    status_code = exc.status_code if exc.status_code and 400 <= exc.status_code < 500 else 502

    return JSONResponse(
        status_code=status_code,
        content={
            "error": "remote_error",
            "message": exc.message,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    return JSONResponse(
        status_code=401,
        content={
            "error": "unauthorized",
            "message": exc.message
        }
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors gracefully"""

    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "detail": str(exc) if settings.DEBUG else None
        }
    )


# HTTP exception handler
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Format HTTP exceptions consistently"""

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "http_error",
            "message": exc.detail,
            "status_code": exc.status_code
        }
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring

    Returns service status and the remote API it talks to
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_url": settings.API_URL,
        "timestamp": time.time()
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "StudyAid Web Client API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Include routers
app.include_router(auth.router)
app.include_router(lectures.router)
app.include_router(flashcards.router)
app.include_router(quizzes.router)
app.include_router(ai.router)
app.include_router(api_keys.router)
app.include_router(progress.router)
app.include_router(admin.router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Log configuration on startup"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Remote study API: {settings.API_URL}")
    logger.info("Application startup complete")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down application")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "studyaid.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
