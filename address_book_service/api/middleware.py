"""Middleware for the FastAPI application."""

import logging
import secrets
import time
from typing import Callable

from fastapi import Request, Response, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from redis.exceptions import ConnectionError, TimeoutError, RedisError
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from address_book_service.config.logging import (
    generate_correlation_id,
    set_correlation_id,
    LoggingService
)
from address_book_service.exceptions import AddressStorageError

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)

CSRF_SESSION_KEY = "csrf"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation IDs for request tracing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation ID."""
        # Get or generate correlation ID
        correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()

        # Set correlation ID in context
        set_correlation_id(correlation_id)

        # Log request
        logging_service.log_operation(
            "info",
            f"Request started: {request.method} {request.url.path}",
            operation="request_start",
            method=request.method,
            path=str(request.url.path),
            query_params=str(request.query_params) if request.query_params else None
        )

        try:
            # Process request
            response = await call_next(request)

            # Add correlation ID to response headers
            response.headers["X-Correlation-ID"] = correlation_id

            # Log response
            logging_service.log_operation(
                "info",
                f"Request completed: {request.method} {request.url.path}",
                operation="request_complete",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code
            )

            return response

        except Exception as e:
            # Log error
            logging_service.log_error(
                f"Request failed: {request.method} {request.url.path}",
                e,
                operation="request_error",
                method=request.method,
                path=str(request.url.path)
            )

            # Return error response with correlation ID
            error_response = JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "message": "An unexpected error occurred",
                    "correlation_id": correlation_id
                }
            )
            error_response.headers["X-Correlation-ID"] = correlation_id
            return error_response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details."""
        start_time = time.time()

        # Process request
        response = await call_next(request)

        # Calculate processing time
        process_time = time.time() - start_time

        # Log request/response details
        logging_service.log_operation(
            "info",
            "Request processed",
            operation="request_metrics",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2),
            content_length=response.headers.get("content-length")
        )

        return response


class CsrfTokenMiddleware(BaseHTTPMiddleware):
    """Give every session a CSRF token before the request is handled.

    Must run inside SessionMiddleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if CSRF_SESSION_KEY not in request.session:
            request.session[CSRF_SESSION_KEY] = secrets.token_hex(32)
        return await call_next(request)


def verify_csrf_token(request: Request, submitted: str) -> None:
    """Raise 403 unless ``submitted`` matches the session token."""
    expected = request.session.get(CSRF_SESSION_KEY)
    if not expected or not submitted or not secrets.compare_digest(expected, submitted):
        logging_service.log_operation(
            "warning",
            "CSRF token mismatch",
            operation="csrf_check",
            path=str(request.url.path),
            method=request.method
        )
        raise HTTPException(status_code=403, detail="Forbidden")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle errors and return appropriate HTTP responses."""
        try:
            return await call_next(request)

        except HTTPException:
            # Let FastAPI handle HTTPExceptions normally
            raise

        except (ConnectionError, TimeoutError, OperationalError, InterfaceError) as e:
            # Store unreachable
            logging_service.log_error(
                "Storage connection error",
                e,
                operation="error_handling",
                path=str(request.url.path),
                method=request.method
            )

            return JSONResponse(
                status_code=503,
                content={
                    "error": "Service Unavailable",
                    "message": "Storage service unavailable"
                }
            )

        except (RedisError, SQLAlchemyError) as e:
            # Other storage errors
            logging_service.log_error(
                "Storage error",
                e,
                operation="error_handling",
                path=str(request.url.path),
                method=request.method
            )

            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "message": "Database error occurred"
                }
            )

        except ValidationError as e:
            # Pydantic validation errors
            logging_service.log_operation(
                "warning",
                "Validation error",
                operation="error_handling",
                path=str(request.url.path),
                method=request.method,
                error=str(e)
            )

            return JSONResponse(
                status_code=400,
                content={
                    "error": "Bad Request",
                    "message": "Invalid request data",
                    "details": e.errors(include_url=False, include_context=False)
                }
            )

        except AddressStorageError as e:
            # Stored data that no longer parses
            logging_service.log_error(
                "Storage data error",
                e,
                operation="error_handling",
                path=str(request.url.path),
                method=request.method
            )

            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "message": "Database error occurred"
                }
            )

        except ValueError as e:
            # Business logic validation errors
            logging_service.log_operation(
                "warning",
                "Value error",
                operation="error_handling",
                path=str(request.url.path),
                method=request.method,
                error=str(e)
            )

            return JSONResponse(
                status_code=400,
                content={
                    "error": "Bad Request",
                    "message": str(e)
                }
            )

        except Exception as e:
            # Unexpected errors
            logging_service.log_error(
                "Unexpected error",
                e,
                operation="error_handling",
                path=str(request.url.path),
                method=request.method
            )

            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "message": "An unexpected error occurred"
                }
            )
