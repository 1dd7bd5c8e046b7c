import json
from contextlib import contextmanager

from googleapiclient.errors import HttpError

from relay.shared import Logger

logger = Logger(__name__).get_logger()


class ServiceError(Exception):
    """Base for every error rendered at the request boundary."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class AuthorizationUnavailable(ValidationError):
    """Raised when the consent flow is requested in static-secret mode."""


class Unauthorized(ServiceError):
    status_code = 401


class FolderNotFound(ServiceError):
    """The folder could not be read: missing, or not shared with us."""

    status_code = 404


class InvalidTarget(ServiceError):
    status_code = 400


class ProviderError(ServiceError):
    status_code = 500


class ConfigurationError(ServiceError):
    status_code = 500


def http_error_message(exc: HttpError) -> str:
    """Pull the human readable message out of a Drive error body."""
    content = getattr(exc, "content", None)
    if not content:
        return str(exc)

    try:
        payload = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return str(exc)

    if isinstance(payload, dict):
        error = payload.get("error", {})
        if isinstance(error, dict) and error.get("message"):
            return error["message"]

    return str(exc)


def provider_message(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        return http_error_message(exc)
    return str(exc) or exc.__class__.__name__


@contextmanager
def provider_errors(operation: str, stacklevel=1):
    # Go 3 levels up to escape @contextmanager methods and current function
    kw = {"stacklevel": 2 + stacklevel}
    try:
        yield

    except ServiceError:
        raise

    except Exception as e:
        message = provider_message(e)
        logger.error("%s failed: %s", operation, message, **kw)
        raise ProviderError(message) from e
