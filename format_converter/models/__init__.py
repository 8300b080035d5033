from format_converter.models.conversion import (
    ConversionHints,
    ConversionRequest,
    ConversionResult,
    SourceCategory,
)

__all__ = [
    "ConversionHints",
    "ConversionRequest",
    "ConversionResult",
    "SourceCategory",
]
