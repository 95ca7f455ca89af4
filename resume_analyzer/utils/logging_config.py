"""
Centralized Logging Configuration for the Resume Analyzer API
"""
import functools
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any


FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-40s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# loggers that share our handlers; pdfminer only gets a level since it is chatty about fonts
ROUTED_LOGGERS = ("resume_analyzer", "uvicorn", "uvicorn.access")


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
        "encoding": "utf8",
    }


def setup_logging(level: str = "INFO", log_file: str = None, enable_file: bool = True, concise: bool = False) -> None:
    """
    Configure console logging and, optionally, rotating daily log files

    Args:
        level: Logging level for the application loggers
        log_file: Path of the main log file (defaults to $LOG_DIR/resume_analyzer_<date>.log)
        enable_file: Also write the main and error-only log files
        concise: Use the short console format (tests)
    """
    stamp = datetime.now().strftime("%Y%m%d")
    log_dir = Path(os.getenv("LOG_DIR", "logs"))

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "simple" if concise else "detailed",
            "stream": "ext://sys.stdout",
        }
    }
    if enable_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_file or log_dir / f"resume_analyzer_{stamp}.log"
        handlers["file"] = _rotating_file(log_file, level)
        handlers["error_file"] = _rotating_file(log_dir / f"resume_analyzer_errors_{stamp}.log", "ERROR")

    loggers: Dict[str, Any] = {
        name: {"level": level if name == "resume_analyzer" else "INFO", "handlers": ["console"], "propagate": name == "resume_analyzer"}
        for name in ROUTED_LOGGERS
    }
    if enable_file:
        loggers["resume_analyzer"]["handlers"] += ["file", "error_file"]
        loggers["uvicorn"]["handlers"].append("file")
    loggers["pdfminer"] = {"level": "ERROR"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": FORMATS["detailed"], "datefmt": "%Y-%m-%d %H:%M:%S"},
            "simple": {"format": FORMATS["simple"]},
        },
        "handlers": handlers,
        "loggers": loggers,
    })

    logger = logging.getLogger("resume_analyzer.logging")
    logger.info(f"Logging configured - level={level} file={log_file if enable_file else 'off'}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with consistent naming

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger under the ``resume_analyzer`` namespace
    """
    if name == "resume_analyzer" or name.startswith("resume_analyzer."):
        return logging.getLogger(name)
    return logging.getLogger(f"resume_analyzer.{name}")


def log_api_call(operation: str):
    """
    Decorator to log API endpoint calls
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(f"api.{operation}")
            start_time = time.time()

            logger.info(f"API {operation} started - {func.__name__}")

            try:
                result = await func(*args, **kwargs)
                execution_time = time.time() - start_time
                logger.info(f"API {operation} completed in {execution_time:.3f}s", extra={"execution_time": execution_time})
                return result
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(f"API {operation} failed after {execution_time:.3f}s: {str(e)}",
                             extra={"execution_time": execution_time, "error": str(e)})
                raise

        return wrapper
    return decorator


def configure_for_environment():
    """Configure logging based on environment variables"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if environment == "development":
        setup_logging(level="DEBUG")
    elif environment == "testing":
        setup_logging(level="WARNING", enable_file=False, concise=True)
    else:
        setup_logging(level=log_level)


class PerformanceMonitor:
    """Context manager for monitoring performance with logging"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms (exceeded threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
