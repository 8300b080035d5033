from enum import Enum
from typing import Dict, List, Optional, TypedDict, Union


class ErrorKind(str, Enum):
    """Closed set of failure categories callers can branch on."""

    FILE_NOT_FOUND = "file_not_found"
    UNSUPPORTED_FORMAT = "unsupported_format"
    INVALID_SELECTION = "invalid_selection"
    CONVERSION_FAILURE = "conversion_failure"
    OPEN_FILE_FAILURE = "open_file_failure"


class PathDetails(TypedDict, total=False):
    """Type-safe details for filesystem errors."""

    path: str
    exists: bool
    is_file: bool


class FormatDetails(TypedDict, total=False):
    """Type-safe details for format errors."""

    file_extension: str
    supported_formats: List[str]
    suggestion: str


class SelectionDetails(TypedDict, total=False):
    """Type-safe details for menu selection errors."""

    raw_input: str
    option_count: int


class ConversionDetails(TypedDict, total=False):
    """Type-safe details for conversion errors."""

    input_format: str
    output_format: str
    category: str
    error: str


ErrorDetails = Union[
    PathDetails,
    FormatDetails,
    SelectionDetails,
    ConversionDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class FormatConverterError(Exception):
    """Base exception for all format converter errors."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class SourceNotFoundError(FormatConverterError):
    """Raised when the source path does not reference an existing file."""

    kind = ErrorKind.FILE_NOT_FOUND

    def __init__(self, message: str, details: Optional[PathDetails] = None):
        super().__init__(message=message, error_code="CONV101", details=details)


class UnsupportedFormatError(FormatConverterError):
    """Raised when the source extension is not in the catalog."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, message: str, details: Optional[FormatDetails] = None):
        super().__init__(message=message, error_code="CONV102", details=details)


class InvalidSelectionError(FormatConverterError):
    """Raised when a target menu choice is non-numeric or out of range."""

    kind = ErrorKind.INVALID_SELECTION

    def __init__(self, message: str, details: Optional[SelectionDetails] = None):
        super().__init__(message=message, error_code="CONV103", details=details)


class ConversionFailedError(FormatConverterError):
    """Raised when the image engine fails to decode, transform or encode."""

    kind = ErrorKind.CONVERSION_FAILURE

    def __init__(self, message: str, details: Optional[ConversionDetails] = None):
        super().__init__(message=message, error_code="CONV104", details=details)


class OpenFileError(FormatConverterError):
    """Raised when the converted file cannot be opened with the OS handler."""

    kind = ErrorKind.OPEN_FILE_FAILURE

    def __init__(self, message: str, details: Optional[PathDetails] = None):
        super().__init__(message=message, error_code="CONV105", details=details)
