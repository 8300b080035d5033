"""Constants and default values for the format converter."""

from typing import Dict, FrozenSet, Tuple

# Output layout
DEFAULT_OUTPUT_DIR_NAME = "Converted"

# Session prompts
DEFAULT_EXIT_KEYWORD = "exit"
AFFIRMATIVE_ANSWER = "y"

# Vector rasterization
DEFAULT_VECTOR_DENSITY = 300  # DPI
POSTSCRIPT_POINTS_PER_INCH = 72
CSS_PIXELS_PER_INCH = 96
MIN_VECTOR_DENSITY = 36
MAX_VECTOR_DENSITY = 2400

# Source categories
VECTOR_EXTENSIONS = frozenset({".svg", ".ai", ".eps"})
MESH_EXTENSIONS = frozenset({".obj", ".stl", ".fbx"})
SCIENTIFIC_EXTENSIONS = frozenset({".fits", ".dcm"})

MESH_WARNING = "3D format conversion is limited."
SCIENTIFIC_WARNING = "Scientific image format conversion may lose metadata."

# Source extension -> legal conversion targets, in menu order.
# Hand-maintained; see FormatCatalog.asymmetries() for pairs that are not mutual.
DEFAULT_FORMAT_TABLE: Dict[str, Tuple[str, ...]] = {
    # Raster
    ".jpg": (".jpeg", ".png", ".bmp", ".webp", ".gif", ".heic", ".tiff"),
    ".jpeg": (".jpg", ".png", ".bmp", ".webp", ".gif", ".heic", ".tiff"),
    ".png": (".jpg", ".jpeg", ".bmp", ".webp", ".gif", ".heic", ".tiff"),
    ".bmp": (".jpg", ".jpeg", ".png", ".webp", ".gif", ".heic", ".tiff"),
    ".webp": (".jpg", ".jpeg", ".png", ".bmp", ".gif", ".heic", ".tiff"),
    ".gif": (".jpg", ".jpeg", ".png", ".bmp", ".webp", ".heic", ".tiff"),
    ".heic": (".jpg", ".jpeg", ".png", ".bmp", ".webp", ".gif", ".tiff"),
    ".tiff": (".jpg", ".jpeg", ".png", ".bmp", ".webp", ".gif", ".heic"),
    # RAW
    ".cr2": (".jpg", ".png", ".tiff", ".dng"),
    ".nef": (".jpg", ".png", ".tiff", ".dng"),
    ".arw": (".jpg", ".png", ".tiff", ".dng"),
    ".dng": (".jpg", ".png", ".tiff", ".cr2", ".nef", ".arw"),
    # Vector
    ".svg": (".png", ".jpg", ".pdf", ".eps", ".ai"),
    ".ai": (".svg", ".eps", ".png", ".jpg", ".pdf"),
    ".eps": (".svg", ".ai", ".png", ".jpg", ".pdf"),
    # 3D
    ".obj": (".stl", ".fbx"),
    ".stl": (".obj", ".fbx"),
    ".fbx": (".obj", ".stl"),
    # Scientific and medical
    ".fits": (".png", ".jpg", ".tiff"),
    ".dcm": (".png", ".jpg", ".tiff"),
    # Additional
    ".dxf": (".png", ".jpg", ".pdf"),
    ".pcx": (".png", ".jpg", ".bmp"),
    ".xbm": (".png", ".jpg", ".bmp"),
}

# Pillow encoders that cannot store an alpha channel
ALPHA_UNSUPPORTED_ENCODERS = frozenset({"JPEG", "BMP", "PCX", "EPS", "PDF"})

# Modes each Pillow encoder can store as-is; encoders not listed take any mode
ENCODER_MODES: Dict[str, FrozenSet[str]] = {
    "PNG": frozenset({"1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16", "I;16B"}),
    "BMP": frozenset({"1", "L", "P", "RGB"}),
    "WEBP": frozenset({"RGB", "RGBA"}),
    "PCX": frozenset({"1", "L", "P", "RGB"}),
}
