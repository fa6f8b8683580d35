class WebhookProcessingError(Exception):
    """Base class for failures while applying a webhook to the local mirror."""


class EntityNotSyncedError(WebhookProcessingError):
    """Raised when a parent repository or pull request is not mirrored locally."""


class MalformedPayloadError(WebhookProcessingError):
    """Raised when a payload lacks an identifier needed to apply it."""


class EventNotFoundError(WebhookProcessingError):
    """Raised when a stored event cannot be found for replay."""


def error_message(exc: BaseException) -> str:
    """Text recorded on a failed event row for *exc*."""
    return str(exc) or exc.__class__.__name__
