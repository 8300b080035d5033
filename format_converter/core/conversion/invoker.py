"""Conversion invoker: the call-through into the image engine."""

import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

import structlog

from format_converter.core.catalog import FormatCatalog, normalize_extension
from format_converter.core.constants import (
    DEFAULT_OUTPUT_DIR_NAME,
    DEFAULT_VECTOR_DENSITY,
    MESH_WARNING,
    SCIENTIFIC_WARNING,
)
from format_converter.core.conversion.engine import ImageEngine, PillowEngine
from format_converter.core.exceptions import (
    ConversionFailedError,
    SourceNotFoundError,
    UnsupportedFormatError,
)
from format_converter.models.conversion import (
    ConversionHints,
    ConversionRequest,
    ConversionResult,
    SourceCategory,
)
from format_converter.utils.logging import LoggingContext

logger = structlog.get_logger()


class ConversionInvoker:
    """Turns a validated request into a file under the output directory."""

    def __init__(
        self,
        catalog: FormatCatalog,
        engine: Optional[ImageEngine] = None,
        output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME,
        vector_density: int = DEFAULT_VECTOR_DENSITY,
        atomic_writes: bool = True,
    ) -> None:
        self.catalog = catalog
        self.engine = engine or PillowEngine()
        self.output_dir_name = output_dir_name
        self.vector_density = vector_density
        self.atomic_writes = atomic_writes

    def validate_source(self, source_path: Union[str, Path]) -> Path:
        """Check the source exists and its extension is a catalog key.

        Raises:
            SourceNotFoundError: source is missing or not a regular file
            UnsupportedFormatError: source extension is not a catalog key
        """
        path = Path(source_path)
        if not path.is_file():
            raise SourceNotFoundError(
                f"File not found: {path}",
                details={"path": str(path), "exists": path.exists()},
            )

        if not self.catalog.is_supported(path.suffix):
            suggestion = self.catalog.suggest(path.suffix) if path.suffix else None
            details = {"file_extension": path.suffix.lower()}
            if suggestion:
                details["suggestion"] = suggestion
            raise UnsupportedFormatError(
                f"Unsupported file format: {path.suffix or '(none)'}",
                details=details,
            )
        return path

    def build_request(
        self, source_path: Union[str, Path], target_extension: str
    ) -> ConversionRequest:
        """Validate inputs against the filesystem and catalog.

        Raises:
            SourceNotFoundError: source is missing or not a regular file
            UnsupportedFormatError: source extension is not a catalog key, or
                target is not a known target
        """
        path = self.validate_source(source_path)
        target = normalize_extension(target_extension)
        if not self.catalog.is_known_target(target):
            raise UnsupportedFormatError(
                f"Unsupported target format: {target}",
                details={
                    "file_extension": target,
                    "supported_formats": list(self.catalog.list_all_targets()),
                },
            )

        return ConversionRequest(
            source_path=path,
            target_extension=target,
            output_dir_name=self.output_dir_name,
        )

    def hints_for(self, category: SourceCategory) -> Tuple[ConversionHints, List[str]]:
        """Engine hints and user-facing warnings for a source category."""
        if category is SourceCategory.VECTOR:
            return (
                ConversionHints(
                    density=self.vector_density, transparent_background=True
                ),
                [],
            )
        if category is SourceCategory.MESH:
            return ConversionHints(), [MESH_WARNING]
        if category is SourceCategory.SCIENTIFIC:
            return ConversionHints(), [SCIENTIFIC_WARNING]
        return ConversionHints(auto_orient=True), []

    def convert(
        self, source_path: Union[str, Path], target_extension: str
    ) -> ConversionResult:
        """Build the request and run it."""
        return self.run(self.build_request(source_path, target_extension))

    def run(self, request: ConversionRequest) -> ConversionResult:
        """Convert one request; engine failures surface as ConversionFailedError."""
        start_time = time.time()
        category = request.category
        hints, warnings = self.hints_for(category)

        with LoggingContext(
            source_format=request.source_extension,
            target_format=request.target_extension,
        ):
            for warning in warnings:
                logger.info(warning, category=category.value)

            request.output_dir.mkdir(parents=True, exist_ok=True)
            output_path = request.output_path

            try:
                if self.atomic_writes:
                    self._write_atomically(request, hints)
                else:
                    self.engine.convert(
                        request.source_path,
                        output_path,
                        request.target_extension,
                        hints,
                    )
            except ConversionFailedError as e:
                logger.error("Conversion failed", error=e.message)
                raise
            except Exception as e:
                logger.error("Conversion failed", error=str(e), exc_info=True)
                raise ConversionFailedError(
                    f"Conversion failed: {str(e)}",
                    details={
                        "input_format": request.source_extension,
                        "output_format": request.target_extension,
                        "category": category.value,
                        "error": str(e),
                    },
                ) from e

            processing_time = time.time() - start_time
            logger.info(
                "Conversion completed",
                category=category.value,
                processing_time=round(processing_time, 3),
            )

        return ConversionResult(
            request=request,
            output_path=output_path,
            hints=hints,
            warnings=warnings,
            processing_time=processing_time,
        )

    def _write_atomically(
        self, request: ConversionRequest, hints: ConversionHints
    ) -> None:
        fd, temp_name = tempfile.mkstemp(
            dir=request.output_dir,
            prefix=f".{request.source_path.stem}.",
            suffix=f"{request.target_extension}.partial",
        )
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            self.engine.convert(
                request.source_path, temp_path, request.target_extension, hints
            )
            os.replace(temp_path, request.output_path)
        finally:
            if temp_path.exists():
                temp_path.unlink()
