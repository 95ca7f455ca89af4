"""
Custom Exception Classes for the Resume Analyzer API
"""
from typing import Dict, Any


class ResumeAnalyzerError(Exception):
    """Base exception for the Resume Analyzer API"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeAnalyzerError):
    """Raised when request data validation fails"""

    status_code = 400

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        kwargs.setdefault('error_code', "VALIDATION_ERROR")
        super().__init__(message, details=details, **kwargs)


class ExtractionError(ValidationError):
    """Raised when an uploaded document cannot be read"""

    def __init__(self, message: str, media_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if media_type:
            details['media_type'] = media_type
        super().__init__(message, error_code="EXTRACTION_ERROR", details=details, **kwargs)


class InsufficientContent(ResumeAnalyzerError):
    """Raised when extracted text is too short to be worth a model call"""

    status_code = 422

    def __init__(
        self,
        message: str = "Could not extract enough text from the file. Please ensure your resume has readable content.",
        found: int = None,
        required: int = None,
        **kwargs
    ):
        details = kwargs.pop('details', {})
        if found is not None:
            details['non_whitespace_chars'] = found
        if required is not None:
            details['required'] = required
        super().__init__(message, error_code="INSUFFICIENT_CONTENT", details=details, **kwargs)


class ModelInvocationError(ResumeAnalyzerError):
    """Raised when talking to the model service fails (config, transport or HTTP status)"""

    status_code = 502

    def __init__(self, message: str, model_name: str = None, upstream_status: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if model_name:
            details['model_name'] = model_name
        if upstream_status is not None:
            details['upstream_status'] = upstream_status
        self.upstream_status = upstream_status
        super().__init__(message, error_code="MODEL_INVOCATION_ERROR", details=details, **kwargs)


class MalformedModelOutput(ResumeAnalyzerError):
    """Raised when the model reply is not a JSON object"""

    status_code = 502

    def __init__(self, message: str, stage: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if stage:
            details['stage'] = stage
        super().__init__(message, error_code="MALFORMED_MODEL_OUTPUT", details=details, **kwargs)


class NotFoundOrForbidden(ResumeAnalyzerError):
    """Raised when a report does not exist or belongs to someone else"""

    status_code = 404

    def __init__(self, message: str = "Report not found", report_id: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if report_id:
            details['report_id'] = report_id
        super().__init__(message, error_code="NOT_FOUND_OR_FORBIDDEN", details=details, **kwargs)


class PersistenceError(ResumeAnalyzerError):
    """Raised when the record store rejects a well-formed operation"""

    status_code = 500

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="PERSISTENCE_ERROR", details=details, **kwargs)


class Unauthorized(ResumeAnalyzerError):
    """Raised when the caller credential is missing or invalid"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, error_code="UNAUTHORIZED", **kwargs)


class ConfigurationError(ResumeAnalyzerError):
    """Raised when configuration is invalid or missing"""

    status_code = 500

    def __init__(self, message: str, config_key: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


def error_payload(exc: ResumeAnalyzerError, request_id: str = None) -> Dict[str, Any]:
    """Body returned to the caller for a pipeline failure"""
    payload = {
        "error": exc.message,
        "error_code": exc.error_code,
    }
    if request_id:
        payload["request_id"] = request_id
    return payload


# Exception context manager for better error handling
class ExceptionContext:
    """Context manager that logs an operation and wraps foreign exceptions"""

    def __init__(self, operation: str, logger=None, wrap_as=PersistenceError, **context):
        self.operation = operation
        self.logger = logger
        self.wrap_as = wrap_as
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        # Re-raise our own exceptions as-is
        if isinstance(exc_val, ResumeAnalyzerError):
            return False

        if not isinstance(exc_val, Exception):
            return False

        raise self.wrap_as(
            f"{self.operation} failed: {exc_val}",
            details=dict(self.context),
            cause=exc_val
        ) from exc_val
