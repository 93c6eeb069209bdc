"""Generate a WordPress plugin that wires pages to a Vite dev server."""

from .assembler import TemplateAssembler, assemble
from .config import (
    CustomPolicy,
    DefaultPolicy,
    DisabledPolicy,
    HmrOptions,
    ProbeCache,
    WpHmrConfig,
)
from .exceptions import ConfigLoadError, InvalidOriginError, WpHmrError
from .origin import Origin

__all__ = [
    "assemble",
    "TemplateAssembler",
    "HmrOptions",
    "ProbeCache",
    "WpHmrConfig",
    "CustomPolicy",
    "DefaultPolicy",
    "DisabledPolicy",
    "Origin",
    "ConfigLoadError",
    "InvalidOriginError",
    "WpHmrError",
]
