"""Error kinds shared by the CodeBit core and sync engine."""

from enum import Enum


class FailureKind(Enum):
    """Why processing of a single CodeBit (file or URL) was abandoned."""

    SYNTAX_ERROR = "syntax_error"
    NOT_A_CODEBIT = "not_a_codebit"
    MISSING_VERSION = "missing_version"
    MISSING_URL = "missing_url"
    MISSING_NAME = "missing_name"
    FETCH_ERROR = "fetch_error"
    IO_ERROR = "io_error"


class CodeBitError(Exception):
    """Base class for CodeBit errors."""

    kind: FailureKind = FailureKind.IO_ERROR


class ConfigError(CodeBitError):
    """Configuration file or environment could not be understood."""


class MetadataSyntaxError(CodeBitError):
    """The metadata block is malformed."""

    kind = FailureKind.SYNTAX_ERROR


class DescriptorError(CodeBitError):
    """A metadata mapping does not describe a usable CodeBit."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind


class FetchError(CodeBitError):
    """Retrieving a master copy failed (network, HTTP status or local I/O)."""

    kind = FailureKind.FETCH_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        msg = super().__str__()
        if self.status_code is not None:
            return f"{self.status_code} {msg}"
        return msg
