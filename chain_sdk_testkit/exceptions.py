"""Custom exception hierarchy for the SDK test kit."""

# ruff: noqa: N818 - Base exception class ending with "Exception" is acceptable for base class


class TestkitException(Exception):
    """Base exception for all test kit errors."""

    def __init__(self, message: str, code: int, hint: str | None = None):
        self.message = message
        self.code = code
        self.hint = hint
        super().__init__(self.message)


class RoutingError(TestkitException):
    """Mock router registration and request validation errors."""

    ERR_VALIDATION_FAILED = 1001
    ERR_MALFORMED_REQUEST = 1002
    ERR_INVALID_ROUTE = 1003


class ConfigError(TestkitException):
    """Configuration errors."""

    ERR_INVALID_URL = 2001
    ERR_INVALID_NETWORK = 2002
    ERR_INVALID_SCHEMA = 2003


class EncodingError(TestkitException):
    """Numeric encoding errors."""

    ERR_INVALID_LITERAL = 3001
    ERR_OUT_OF_RANGE = 3002
    ERR_INVALID_HEX = 3003


class ClientError(TestkitException):
    """API client transport errors."""

    ERR_UNREACHABLE = 4001
    ERR_TIMEOUT = 4002
    ERR_CLOSED = 4003
