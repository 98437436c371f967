from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    VALIDATION = "validation"
    NO_JSON = "no_json"
    PARSE = "parse"
    AUTH = "auth"
    QUOTA = "quota"
    PROVIDER = "provider"


class ReceiptError(Exception):
    """Base for every failure raised while handling a receipt.

    ``kind`` is what the HTTP layer dispatches on; the message is for logs
    and, for config/validation errors, for the client.
    """

    kind = ErrorKind.PROVIDER

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ConfigError(ReceiptError):
    kind = ErrorKind.CONFIG


class UploadValidationError(ReceiptError):
    kind = ErrorKind.VALIDATION

    def __init__(self, error: str, message: str):
        super().__init__(message)
        self.error = error  # short title, e.g. "Missing file"


class ExtractionError(ReceiptError):
    """The model answered, but no JSON object could be located in the text."""

    kind = ErrorKind.NO_JSON


class ParseError(ReceiptError):
    """A JSON-looking span was found but did not decode."""

    kind = ErrorKind.PARSE


class ProviderError(ReceiptError):
    """Failure surfaced by the inference provider (auth, quota, network...)."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.PROVIDER, provider: str | None = None):
        super().__init__(message, kind)
        self.provider = provider
