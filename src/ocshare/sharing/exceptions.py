"""Exception hierarchy for share operations."""


class ShareError(Exception):
    """Base exception for all share errors."""


class TransportError(ShareError):
    """Raised by the request layer when the server answers with a non-success status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(f"{status_code}: {message}" if message else str(status_code))
        self.status_code = status_code
        self.message = message


class PasswordRequiredError(TransportError):
    """A link share cannot be created without a password (legacy 403)."""

    def __init__(self, message: str = "") -> None:
        super().__init__(403, message)


class PasswordUpdateError(TransportError):
    """Setting the password of a link share failed."""


class ParseError(ShareError):
    """A successful reply is missing a required share field."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Malformed share payload: missing {field!r}")
        self.field = field
