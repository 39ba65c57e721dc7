"""DB Scaffold code generator - Python data types and CRUD helpers from a schema."""

from .model import (
    GeneratedProperty,
    GeneratedType,
    GeneratedFile,
    build_generated_type,
    build_generated_file,
    DEFAULT_VALUES,
)
from .renderer import (
    Renderer,
    RenderContext,
    PropertySets,
    classify,
    METHOD_ORDER,
)
from .main import (
    FileWriter,
    GenerationOptions,
    generate,
    open_connection,
    main,
)

__all__ = [
    "GeneratedProperty",
    "GeneratedType",
    "GeneratedFile",
    "build_generated_type",
    "build_generated_file",
    "DEFAULT_VALUES",
    "Renderer",
    "RenderContext",
    "PropertySets",
    "classify",
    "METHOD_ORDER",
    "FileWriter",
    "GenerationOptions",
    "generate",
    "open_connection",
    "main",
]
