"""Conversion invoker and image engine."""

from format_converter.core.conversion.engine import ImageEngine, ImageHandle, PillowEngine
from format_converter.core.conversion.invoker import ConversionInvoker

__all__ = ["ConversionInvoker", "ImageEngine", "ImageHandle", "PillowEngine"]
