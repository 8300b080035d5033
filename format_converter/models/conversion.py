"""Data models for file conversion."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from format_converter.core.constants import (
    DEFAULT_OUTPUT_DIR_NAME,
    MAX_VECTOR_DENSITY,
    MESH_EXTENSIONS,
    MIN_VECTOR_DENSITY,
    SCIENTIFIC_EXTENSIONS,
    VECTOR_EXTENSIONS,
)


class SourceCategory(str, Enum):
    """Broad family of a source format, drives engine hints and warnings."""

    RASTER = "raster"
    VECTOR = "vector"
    MESH = "mesh"
    SCIENTIFIC = "scientific"

    @classmethod
    def from_extension(cls, extension: str) -> "SourceCategory":
        ext = extension.lower()
        if ext in VECTOR_EXTENSIONS:
            return cls.VECTOR
        if ext in MESH_EXTENSIONS:
            return cls.MESH
        if ext in SCIENTIFIC_EXTENSIONS:
            return cls.SCIENTIFIC
        return cls.RASTER


class ConversionHints(BaseModel):
    """Format-specific settings handed to the image engine before encoding."""

    model_config = ConfigDict(frozen=True)

    density: Optional[int] = Field(
        default=None,
        ge=MIN_VECTOR_DENSITY,
        le=MAX_VECTOR_DENSITY,
        description="Rasterization resolution in DPI for vector sources",
    )
    transparent_background: bool = Field(
        default=False, description="Keep a transparent canvas behind vector content"
    )
    auto_orient: bool = Field(
        default=False, description="Bake embedded orientation into the pixel layout"
    )


class ConversionRequest(BaseModel):
    """One source file and the extension it should be converted to."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    target_extension: str
    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME

    @field_validator("target_extension")
    @classmethod
    def normalize_target(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("target_extension must not be empty")
        return v if v.startswith(".") else f".{v}"

    @property
    def source_extension(self) -> str:
        return self.source_path.suffix.lower()

    @property
    def category(self) -> SourceCategory:
        return SourceCategory.from_extension(self.source_extension)

    @property
    def output_dir(self) -> Path:
        return self.source_path.parent / self.output_dir_name

    @property
    def output_path(self) -> Path:
        """`<source_dir>/<output_dir_name>/<source_stem><target_ext>`."""
        return self.output_dir / f"{self.source_path.stem}{self.target_extension}"


class ConversionResult(BaseModel):
    """Outcome of a successful conversion."""

    request: ConversionRequest
    output_path: Path
    hints: ConversionHints
    warnings: List[str] = Field(default_factory=list)
    processing_time: float = Field(default=0.0, description="Seconds spent converting")
