"""Error taxonomy for the Recipe Book service.

Every failure that crosses a component boundary is a RecipeBookError carrying
a typed ErrorKind, so callers branch on the kind instead of on message text:

- RecipeValidationError: missing/invalid user input, raised before any network call
- StoreUnavailable / PermissionDenied / NotFound: raised by the data access layer
- SuggestionFailed / ImageGenerationFailed: raised by the Gemini oracle clients
- ImageSearchFailed: raised by the stock photo fallback search
- FallbackExhausted: every image source failed (non-fatal, save goes on without image)
"""

from enum import Enum
from typing import Optional

from src.utils.logger import logger


class ErrorKind(str, Enum):
    """Typed failure categories."""

    VALIDATION = "validation"
    STORE_UNAVAILABLE = "store_unavailable"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    SUGGESTION_FAILED = "suggestion_failed"
    IMAGE_GENERATION_FAILED = "image_generation_failed"
    IMAGE_SEARCH_FAILED = "image_search_failed"
    FALLBACK_EXHAUSTED = "fallback_exhausted"


class RecipeBookError(Exception):
    """Base class for all typed service errors."""

    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str, *, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class RecipeValidationError(RecipeBookError):
    kind = ErrorKind.VALIDATION


class StoreUnavailable(RecipeBookError):
    kind = ErrorKind.STORE_UNAVAILABLE


class PermissionDenied(RecipeBookError):
    kind = ErrorKind.PERMISSION_DENIED


class NotFound(RecipeBookError):
    kind = ErrorKind.NOT_FOUND


class SuggestionFailed(RecipeBookError):
    kind = ErrorKind.SUGGESTION_FAILED


class ImageGenerationFailed(RecipeBookError):
    kind = ErrorKind.IMAGE_GENERATION_FAILED


class ImageSearchFailed(RecipeBookError):
    kind = ErrorKind.IMAGE_SEARCH_FAILED


class FallbackExhausted(RecipeBookError):
    kind = ErrorKind.FALLBACK_EXHAUSTED


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Run a best-effort async step, logging instead of raising on failure.

    Only for side effects whose failure must not block the owning action
    (blob cleanup, optional image sources).

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Delete image blob").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of coroutine if successful, default_return otherwise.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Synchronous version of safe_execute_async. Same behavior and patterns."""
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
