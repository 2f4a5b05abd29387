from typing import Any, Optional


GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class FieldValidationError(ValueError):
    """A single form field failed local validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class FormValidationError(ValueError):
    """Submission blocked locally. Never reaches the transport."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(errors.values()))

    @property
    def message(self) -> str:
        return str(self)


class RemoteError(Exception):
    """Failure surfaced by the remote product API or the network."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def extract_error_message(body: Any, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    Pull a user-facing message out of a remote error body.

    Prefers a list of per-field entries under "errors" (joined with ", "),
    then a single "message", then the fallback.
    """
    if not isinstance(body, dict):
        return fallback

    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        parts = []
        for entry in errors:
            if isinstance(entry, dict):
                parts.append(str(entry.get("msg") or entry.get("message") or entry))
            else:
                parts.append(str(entry))
        return ", ".join(parts)
    if isinstance(errors, str) and errors:
        return errors

    message = body.get("message")
    if isinstance(message, str) and message:
        return message

    return fallback
