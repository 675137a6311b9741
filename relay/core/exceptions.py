# relay/core/exceptions.py


class MessageValidationError(Exception):
    """A required message field is missing or empty."""


class MessageNotFoundError(Exception):
    """No message has the requested id."""


class StorageError(Exception):
    """The storage backend failed to complete a call."""
