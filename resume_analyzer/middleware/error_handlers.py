"""
Exception handlers and request middleware for the Resume Analyzer API
"""
import time
import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from resume_analyzer.utils.exceptions import ResumeAnalyzerError, error_payload
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


async def resume_analyzer_error_handler(request: Request, exc: ResumeAnalyzerError) -> JSONResponse:
    request_id = _request_id(request)
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}",
        extra={
            "request_id": request_id,
            "error_code": exc.error_code,
            "details": exc.details,
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc, request_id),
        headers={"X-Request-ID": request_id},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    request_id = _request_id(request)
    logger.warning(
        f"Validation error in {request.method} {request.url.path}: {exc.errors()}",
        extra={"request_id": request_id}
    )
    return JSONResponse(
        status_code=422,
        content={
            "error": "Request data validation failed",
            "error_code": "VALIDATION_ERROR",
            "validation_errors": jsonable_errors(exc),
            "request_id": request_id,
        },
        headers={"X-Request-ID": request_id},
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResumeAnalyzerError, resume_analyzer_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Assigns request ids and turns unhandled exceptions into a JSON 500"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "An unexpected error occurred. Please try again later.",
                    "error_code": "INTERNAL_ERROR",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )

        logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra={"request_id": request_id, "status_code": response.status_code}
        )
        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs request metadata; bodies carry resume text and are never logged"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.debug(
            f"Request details: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "content_length": request.headers.get("content-length", "0"),
                "content_type": request.headers.get("content-type", ""),
            }
        )

        response = await call_next(request)
        processing_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code, "processing_time": processing_time}
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', 'unknown')

        response = await call_next(request)

        processing_time = time.time() - start_time
        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={"request_id": request_id, "processing_time": processing_time}
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
