"""Error handling utilities for the RAG chat application."""

import logging
import traceback
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar, Union
from functools import wraps

from .exceptions import (
    RagChatError, UnsupportedFileType, ExtractionError, StorageError, LLMError, ConfigurationError
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Most specific first; the first matching entry wins
HTTP_STATUS_BY_ERROR: Tuple[Tuple[Type[RagChatError], int], ...] = (
    (UnsupportedFileType, 415),
    (ExtractionError, 422),
    (StorageError, 503),
    (LLMError, 502),
    (ConfigurationError, 400),
)


def http_status_for(error: RagChatError) -> int:
    """HTTP status code the API answers with for ``error``."""
    for error_type, status_code in HTTP_STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def _wrap(error: Exception, exception_type: Type[RagChatError], message: str, **details: Any) -> RagChatError:
    return exception_type(
        message=message,
        details={'original_error': str(error), **details}
    )


def _log_extra(error: Exception, context: str, details: Optional[dict]) -> Dict[str, Any]:
    if isinstance(error, RagChatError):
        return {
            'error_code': error.error_code,
            'details': {**error.details, **(details or {})},
            'context': context
        }
    return {
        'original_error': str(error),
        'details': details or {},
        'context': context,
        'traceback': traceback.format_exc()
    }


def log_error(
    error: Exception,
    context: str,
    details: Optional[dict] = None,
    level: int = logging.ERROR
) -> None:
    """Log ``error`` as "<context>: <message>" with its code and details attached."""
    message = error.message if isinstance(error, RagChatError) else str(error)
    logger.log(level, f"{context}: {message}", extra=_log_extra(error, context, details))


def handle_errors(
    default_return: Any = None,
    exception_type: Type[RagChatError] = RagChatError,
    log_level: int = logging.ERROR,
    reraise: bool = False
):
    """Log failures of the decorated function and return ``default_return``.

    With ``reraise`` application errors propagate unchanged and anything else
    is raised as ``exception_type``.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, Any]]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except RagChatError as e:
                log_error(e, f"{func.__name__} failed", level=log_level)
                if reraise:
                    raise
                return default_return
            except Exception as e:
                log_error(e, f"Unexpected error in {func.__name__}", level=log_level)
                if reraise:
                    raise _wrap(
                        e, exception_type, f"Unexpected error in {func.__name__}: {str(e)}",
                        function=func.__name__
                    ) from e
                return default_return
        return wrapper
    return decorator


def safe_execute(
    func: Callable[[], T],
    context: str,
    default_return: Any = None,
    exception_type: Type[RagChatError] = RagChatError
) -> Union[T, Any]:
    """Run ``func``; on failure log it (as ``exception_type``) and return the default."""
    try:
        return func()
    except RagChatError as e:
        log_error(e, context)
    except Exception as e:
        log_error(_wrap(e, exception_type, f"Error in {context}: {str(e)}"), context)
    return default_return
