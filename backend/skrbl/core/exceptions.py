from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

class SkrblException(Exception):
    """Base exception for SKRBL application"""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class ValidationError(SkrblException):
    """Raised when a request is missing required fields or carries malformed ones"""
    def __init__(self, message: str = "Validation error"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)

class UnauthorizedError(SkrblException):
    """Raised when a bearer token or cron secret is missing, invalid or lacks the role"""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)

class ForbiddenError(SkrblException):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)

class NotFoundError(SkrblException):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)

class JobNotFoundError(NotFoundError):
    """Raised when a job is not found"""
    def __init__(self, message: str = "Job not found"):
        super().__init__(message)

class RateLimitedError(SkrblException):
    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, status.HTTP_429_TOO_MANY_REQUESTS)

class UpstreamError(SkrblException):
    """Raised when the database or a third-party provider fails"""
    def __init__(self, message: str = "Upstream service error"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message}
    )

async def skrbl_exception_handler(request: Request, exc: SkrblException):
    """Handle custom SKRBL exceptions"""
    if exc.status_code >= 500:
        logger.error(f"SKRBL exception on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"SKRBL exception on {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message)

async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render body/query validation failures as 400 with the first offending field"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
        if first.get("type") == "missing":
            message = f"Missing required field: {field}"
        else:
            message = f"Invalid field {field}: {first.get('msg')}"
    else:
        message = "Invalid request"
    logger.warning(f"Validation failed on {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)

async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle SQLAlchemy database exceptions"""
    logger.error(f"Database error: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred")

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
