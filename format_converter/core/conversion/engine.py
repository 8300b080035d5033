"""Image engine boundary and its Pillow-backed implementation."""

from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional

import pillow_heif
import structlog
from PIL import Image, ImageOps, UnidentifiedImageError

from format_converter.core.constants import (
    ALPHA_UNSUPPORTED_ENCODERS,
    CSS_PIXELS_PER_INCH,
    ENCODER_MODES,
    POSTSCRIPT_POINTS_PER_INCH,
)
from format_converter.core.exceptions import ConversionFailedError
from format_converter.models.conversion import ConversionHints

# Register HEIF/HEIC opener and encoder with Pillow
pillow_heif.register_heif_opener()

logger = structlog.get_logger()

HIGH_BIT_DEPTH_MODES = ("I", "I;16", "F")


class ImageHandle:
    """A decoded (or still pending) image owned by a single conversion."""

    def __init__(self, source_path: Path, image: Optional[Image.Image] = None):
        self.source_path = source_path
        self.image = image
        self.hints = ConversionHints()

    @property
    def extension(self) -> str:
        return self.source_path.suffix.lower()

    @property
    def is_pending(self) -> bool:
        return self.image is None

    def replace(self, image: Image.Image) -> None:
        """Swap in a transformed image, releasing the previous one."""
        if self.image is not None and self.image is not image:
            self.image.close()
        self.image = image

    def close(self) -> None:
        if self.image is not None:
            self.image.close()
            self.image = None

    def __enter__(self) -> "ImageHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ImageEngine(ABC):
    """Abstract decode / configure / encode capability."""

    @abstractmethod
    def load(self, path: Path) -> ImageHandle:
        """Open the source file."""

    @abstractmethod
    def configure(self, handle: ImageHandle, hints: ConversionHints) -> None:
        """Apply format-specific hints before encoding."""

    @abstractmethod
    def write(self, handle: ImageHandle, path: Path, target_format: str) -> None:
        """Encode the image to `path` using the encoder for `target_format`."""

    def convert(
        self,
        source_path: Path,
        output_path: Path,
        target_format: str,
        hints: ConversionHints,
    ) -> None:
        """Run load, configure and write with the handle scoped to this call."""
        with self.load(source_path) as handle:
            self.configure(handle, hints)
            self.write(handle, output_path, target_format)


class PillowEngine(ImageEngine):
    """Engine backed by Pillow, pillow-heif and CairoSVG."""

    def load(self, path: Path) -> ImageHandle:
        path = Path(path)

        # SVG needs the density before it can be rasterized
        if path.suffix.lower() == ".svg":
            if not path.is_file():
                raise ConversionFailedError(
                    f"Failed to load image: {path.name} does not exist",
                    details={"input_format": ".svg"},
                )
            return ImageHandle(path)

        try:
            image = Image.open(path)
        except (UnidentifiedImageError, OSError) as e:
            raise ConversionFailedError(
                f"Failed to load image: {str(e)}",
                details={"input_format": path.suffix.lower(), "error": str(e)},
            ) from e

        logger.debug(
            "Opened source image",
            detected_format=image.format,
            mode=image.mode,
            width=image.width,
            height=image.height,
        )
        return ImageHandle(path, image)

    def configure(self, handle: ImageHandle, hints: ConversionHints) -> None:
        handle.hints = hints

        try:
            if handle.is_pending:
                handle.replace(self._rasterize_svg(handle.source_path, hints))
            elif handle.image.format == "EPS":
                self._rasterize_postscript(handle.image, hints)

            if hints.auto_orient:
                handle.replace(ImageOps.exif_transpose(handle.image))
        except ConversionFailedError:
            raise
        except Exception as e:
            raise ConversionFailedError(
                f"Failed to prepare image: {str(e)}",
                details={"input_format": handle.extension, "error": str(e)},
            ) from e

    def write(self, handle: ImageHandle, path: Path, target_format: str) -> None:
        encoder = self.encoder_for(target_format)
        if encoder is None:
            raise ConversionFailedError(
                f"No encoder available for {target_format}",
                details={"input_format": handle.extension, "output_format": target_format},
            )

        if handle.is_pending:
            self.configure(handle, handle.hints)

        try:
            image = self._prepare_for_encoder(handle.image, encoder)
            image.save(path, format=encoder)
        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as {encoder}: {str(e)}",
                details={
                    "input_format": handle.extension,
                    "output_format": target_format,
                    "error": str(e),
                },
            ) from e

        logger.debug("Encoded image", encoder=encoder, mode=image.mode)

    @staticmethod
    def encoder_for(target_format: str) -> Optional[str]:
        """Pillow encoder name for an extension, if Pillow can write it."""
        ext = target_format.lower()
        if not ext.startswith("."):
            ext = f".{ext}"

        encoder = Image.registered_extensions().get(ext)
        if encoder is None or encoder not in Image.SAVE:
            return None
        return encoder

    def _rasterize_svg(self, path: Path, hints: ConversionHints) -> Image.Image:
        import cairosvg

        scale = (hints.density or CSS_PIXELS_PER_INCH) / CSS_PIXELS_PER_INCH
        png_data = cairosvg.svg2png(
            url=str(path),
            scale=scale,
            background_color=None if hints.transparent_background else "white",
        )
        image = Image.open(BytesIO(png_data))
        image.load()

        logger.debug("Rasterized SVG", density=hints.density, width=image.width)
        return image

    def _rasterize_postscript(self, image: Image.Image, hints: ConversionHints) -> None:
        # Ghostscript renders at 72 DPI per unit of scale
        scale = 1
        if hints.density:
            scale = max(1, round(hints.density / POSTSCRIPT_POINTS_PER_INCH))

        image.load(scale=scale, transparency=hints.transparent_background)
        logger.debug("Rasterized PostScript", scale=scale, density=hints.density)

    @staticmethod
    def _has_alpha(image: Image.Image) -> bool:
        return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info

    def _prepare_for_encoder(self, image: Image.Image, encoder: str) -> Image.Image:
        """Convert the color mode when the encoder cannot store it."""
        writable = ENCODER_MODES.get(encoder)

        if (
            image.mode in HIGH_BIT_DEPTH_MODES
            and encoder != "TIFF"
            and not (writable and image.mode in writable)
        ):
            image = image.convert("L")

        if encoder in ALPHA_UNSUPPORTED_ENCODERS:
            if self._has_alpha(image):
                rgba = image.convert("RGBA")
                # White background for formats without transparency
                background = Image.new("RGB", rgba.size, (255, 255, 255))
                background.paste(rgba, mask=rgba.split()[3])
                return background

            if image.mode not in ("RGB", "L"):
                return image.convert("RGB")

        # CMYK, YCbCr, LAB and similar modes the encoder cannot write
        if writable is not None and image.mode not in writable:
            if self._has_alpha(image) and "RGBA" in writable:
                return image.convert("RGBA")
            return image.convert("RGB")

        return image
