"""
Error Handling Module for CapTrack

This module provides centralized error handling with:
- Custom exception hierarchy for the entry lifecycle
- Standardized error responses
- Error logging and tracking
- Database error handling that never leaks storage details
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID
import logging

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import (
    SQLAlchemyError,
    IntegrityError,
    OperationalError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
logger = logging.getLogger("captrack.errors")

HTTP_423_LOCKED = 423


def _iso_utc(moment: datetime) -> str:
    """ISO-8601 with a trailing Z for an aware UTC datetime."""
    return moment.isoformat().replace("+00:00", "Z")


class ErrorCode(str, Enum):
    """Standardized error codes for the application"""

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    ADJUSTMENT_REASON_REQUIRED = "ADJUSTMENT_REASON_REQUIRED"
    DAILY_HOURS_EXCEEDED = "DAILY_HOURS_EXCEEDED"
    INVALID_REASSIGNMENT_TARGET = "INVALID_REASSIGNMENT_TARGET"

    # Authentication/Authorization Errors (401/403)
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    TOKEN_INVALID = "TOKEN_INVALID"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    NOT_ENTRY_OWNER = "NOT_ENTRY_OWNER"
    SELF_APPROVAL_FORBIDDEN = "SELF_APPROVAL_FORBIDDEN"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Resource Errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Lifecycle Errors
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    PERIOD_LOCKED = "PERIOD_LOCKED"

    # Database Errors (500)
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DATA_INTEGRITY_ERROR = "DATA_INTEGRITY_ERROR"

    # Internal Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base exception for all application exceptions"""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.field = field
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response"""
        result = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": _iso_utc(self.timestamp),
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationException(AppException):
    """Base validation exception"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            field=field,
        )


class AdjustmentReasonRequiredException(ValidationException):
    """Confirmed hours moved too far from the estimate without a reason"""

    def __init__(self, estimated: Any, confirmed: Any):
        super().__init__(
            message="Adjustment reason required when hours change more than 20%",
            field="adjustment_reason",
            code=ErrorCode.ADJUSTMENT_REASON_REQUIRED,
            details={"hours_estimated": str(estimated), "hours_confirmed": str(confirmed)},
        )


class DailyHoursExceededException(ValidationException):
    """Developer's total for a day would pass the cap"""

    def __init__(self, entry_date: str, total: Any, cap: Any):
        super().__init__(
            message=f"Total hours for {entry_date} would be {total}, exceeding the {cap}h daily limit",
            field="hours",
            code=ErrorCode.DAILY_HOURS_EXCEEDED,
            details={"date": entry_date, "total_hours": str(total), "daily_cap": str(cap)},
        )


class InvalidReassignmentTargetException(ValidationException):
    """Target project cannot receive the entry"""

    def __init__(self, message: str, project_id: Optional[Union[str, UUID]] = None):
        super().__init__(
            message=message,
            field="new_project_id",
            code=ErrorCode.INVALID_REASSIGNMENT_TARGET,
            details={"project_id": str(project_id)} if project_id else None,
        )


# ============================================================================
# Authentication/Authorization Exceptions
# ============================================================================

class AuthenticationException(AppException):
    """Base authentication exception"""

    def __init__(
        self,
        message: str = "Authentication required",
        code: ErrorCode = ErrorCode.UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class TokenInvalidException(AuthenticationException):
    """Token is invalid"""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(
            message=message,
            code=ErrorCode.TOKEN_INVALID,
        )


class AuthorizationException(AppException):
    """Authorization denied exception"""

    def __init__(
        self,
        message: str = "Permission denied",
        required_permission: Optional[str] = None,
        code: ErrorCode = ErrorCode.FORBIDDEN,
        details: Optional[Dict[str, Any]] = None,
    ):
        _details = details or {}
        if required_permission:
            _details["required_permission"] = required_permission
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=_details,
        )


class InsufficientPermissionsException(AuthorizationException):
    """Actor's role does not allow the operation"""

    def __init__(self, required_permission: str = "manager", user_role: Optional[str] = None):
        details = {}
        if user_role:
            details["current_role"] = user_role
        super().__init__(
            message="Manager or admin access required",
            required_permission=required_permission,
            code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            details=details,
        )


class NotEntryOwnerException(AuthorizationException):
    """Entry belongs to someone else"""

    def __init__(self, entry_id: Union[str, UUID]):
        super().__init__(
            message="Not your entry",
            code=ErrorCode.NOT_ENTRY_OWNER,
            details={"entry_id": str(entry_id)},
        )


class SelfApprovalForbiddenException(AuthorizationException):
    """Segregation of duties: nobody reviews their own time"""

    def __init__(self, entry_id: Union[str, UUID]):
        super().__init__(
            message="Cannot approve your own entries (segregation of duties)",
            code=ErrorCode.SELF_APPROVAL_FORBIDDEN,
            details={"entry_id": str(entry_id)},
        )


# ============================================================================
# Resource Exceptions
# ============================================================================

class NotFoundException(AppException):
    """Resource not found exception"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Union[str, UUID]] = None,
        message: Optional[str] = None,
        code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        if message is None:
            if resource_id:
                message = f"{resource_type} with ID '{resource_id}' not found"
            else:
                message = f"{resource_type} not found"
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": str(resource_id) if resource_id else None},
        )


class EntryNotFoundException(NotFoundException):
    """Entry not found"""

    def __init__(self, entry_id: Union[str, UUID]):
        super().__init__(
            resource_type="Entry",
            resource_id=entry_id,
            code=ErrorCode.ENTRY_NOT_FOUND,
        )


class ProjectNotFoundException(NotFoundException):
    """Project not found"""

    def __init__(self, project_id: Union[str, UUID]):
        super().__init__(
            resource_type="Project",
            resource_id=project_id,
            code=ErrorCode.PROJECT_NOT_FOUND,
        )


# ============================================================================
# Lifecycle Exceptions
# ============================================================================

class InvalidStateTransitionException(AppException):
    """Entry status does not allow the requested operation"""

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        operation: Optional[str] = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ):
        details = {}
        if current_status:
            details["current_status"] = current_status
        if operation:
            details["operation"] = operation
        super().__init__(
            code=ErrorCode.INVALID_STATE_TRANSITION,
            message=message,
            status_code=status_code,
            details=details,
        )


class PeriodLockedException(AppException):
    """Accounting period is locked; entries dated in it are frozen"""

    def __init__(self, year: int, month: int):
        self.year = year
        self.month = month
        self.period = f"{year:04d}-{month:02d}"
        super().__init__(
            code=ErrorCode.PERIOD_LOCKED,
            message=f"Period {self.period} is locked and cannot be modified",
            status_code=HTTP_423_LOCKED,
            details={"year": year, "month": month, "period": self.period},
        )


# ============================================================================
# Database Exceptions
# ============================================================================

class DatabaseException(AppException):
    """Database error exception"""

    def __init__(
        self,
        message: str = "A database error occurred",
        code: ErrorCode = ErrorCode.DATABASE_ERROR,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            original_error=original_error,
        )


# ============================================================================
# Exception Handlers
# ============================================================================

def create_error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
    field: Optional[str] = None,
) -> JSONResponse:
    """Create a standardized error response"""
    content = {
        "detail": {
            "code": code.value,
            "message": message,
            "timestamp": _iso_utc(datetime.now(timezone.utc)),
        }
    }
    if field:
        content["detail"]["field"] = field
    if details:
        content["detail"]["details"] = details

    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"AppException: {exc.code.value} - {exc.message}",
        extra={
            "code": exc.code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
        },
        exc_info=exc.original_error,
    )

    return create_error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        field=exc.field,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException"""
    # Map status codes to error codes
    code_map = {
        400: ErrorCode.INVALID_INPUT,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.RESOURCE_CONFLICT,
        422: ErrorCode.VALIDATION_ERROR,
        423: ErrorCode.PERIOD_LOCKED,
        500: ErrorCode.INTERNAL_ERROR,
    }

    error_code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    logger.warning(
        f"HTTPException: {exc.status_code} - {message}",
        extra={"path": request.url.path, "method": request.method},
    )

    return create_error_response(
        code=error_code,
        message=message,
        status_code=exc.status_code,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors; malformed input is a 400"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning(
        f"ValidationError: {len(errors)} validation errors",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )

    return create_error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Request validation failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy errors"""
    error_message = "A database error occurred"
    error_code = ErrorCode.DATABASE_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, IntegrityError):
        error_message = "Data integrity constraint violated"
        error_code = ErrorCode.DATA_INTEGRITY_ERROR
        error_str = str(exc.orig).lower() if exc.orig else ""
        if "unique" in error_str or "duplicate" in error_str:
            error_message = "A record with this value already exists"
            error_code = ErrorCode.DUPLICATE_ENTRY
            status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, OperationalError):
        error_message = "Database operation failed"
        error_code = ErrorCode.CONNECTION_ERROR

    logger.error(
        f"SQLAlchemyError: {type(exc).__name__} - {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )

    return create_error_response(
        code=error_code,
        message=error_message,
        status_code=status_code,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions"""
    logger.critical(
        f"UnhandledException: {type(exc).__name__} - {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )

    # Never expose internal error details
    return create_error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================================================
# Error Tracking Middleware
# ============================================================================

class ErrorTrackingMiddleware:
    """Middleware for tracking and logging all errors"""

    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            logger.error(
                f"Request failed: {scope.get('path', 'unknown')}",
                extra={
                    "path": scope.get("path"),
                    "method": scope.get("method"),
                    "exception_type": type(exc).__name__,
                },
                exc_info=True,
            )
            raise


# Export all exceptions for easy importing
__all__ = [
    # Base
    "AppException",
    "ErrorCode",

    # Validation
    "ValidationException",
    "AdjustmentReasonRequiredException",
    "DailyHoursExceededException",
    "InvalidReassignmentTargetException",

    # Auth
    "AuthenticationException",
    "TokenInvalidException",
    "AuthorizationException",
    "InsufficientPermissionsException",
    "NotEntryOwnerException",
    "SelfApprovalForbiddenException",

    # Resource
    "NotFoundException",
    "EntryNotFoundException",
    "ProjectNotFoundException",

    # Lifecycle
    "InvalidStateTransitionException",
    "PeriodLockedException",

    # Database
    "DatabaseException",

    # Handlers
    "setup_exception_handlers",
    "create_error_response",
    "ErrorTrackingMiddleware",
]
