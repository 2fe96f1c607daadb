"""Exception types shared across the document QA pipeline."""


class DocQAError(Exception):
    """Base class for errors raised by docqa."""


class InvalidArgumentError(DocQAError, ValueError):
    """A required input was missing, blank or out of range."""


class DocumentLoadError(DocQAError):
    """The document bytes could not be opened or parsed."""


class ProviderFailure(DocQAError):
    """An embedding or completion provider call failed."""

    def __init__(self, action: str, message: str):
        super().__init__(f"{action}: {message}")
        self.action = action
        self.message = message


def require_text(value, name: str) -> str:
    """Return value unchanged, raising InvalidArgumentError when it is blank."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{name} cannot be null or whitespace.")
    return value
