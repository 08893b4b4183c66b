"""Model Code Generator - Generates table metadata code from Go model structs."""

from .builder import (
    FieldDescriptor,
    ModelDescriptor,
    build_model,
)
from .classifier import (
    GenerationContext,
    TypeHandle,
    classify,
)
from .emitter import Emitter
from .strategy import (
    GenerationStrategy,
    TemplateStrategy,
    load_strategy_config,
)
from .tags import resolve_column
from .main import (
    GenerationResult,
    generate,
    main,
    DEFAULT_FILE_PREFIX,
)

__all__ = [
    "FieldDescriptor",
    "ModelDescriptor",
    "build_model",
    "GenerationContext",
    "TypeHandle",
    "classify",
    "Emitter",
    "GenerationStrategy",
    "TemplateStrategy",
    "load_strategy_config",
    "resolve_column",
    "GenerationResult",
    "generate",
    "main",
    "DEFAULT_FILE_PREFIX",
]
