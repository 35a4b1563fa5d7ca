"""
Module: builder

Purpose:
    Layout and rendering pipeline turning a Paper into a two-column PDF
    with an answer key and solutions.

Key Functions:
    - generate_pdf(): Main entry point
    - generate_pdf_async(): Awaitable variant
    - load_config() / get_config(): Configuration

Key Classes:
    - PaperConfig: Layout configuration
    - GenerationResult: Result of one generation call
    - RenderingError: Engine failure

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - paper_toolkit.api.server: HTTP endpoint
    - paper_toolkit.cli: Command line
"""

from .config import ConfigError, PaperConfig, get_config, load_config
from .controller import (
    GenerationResult,
    Section,
    generate_pdf,
    generate_pdf_async,
)
from .diagnostics import DegradedContentWarning
from .output import RenderingError

__all__ = [
    # Config
    "PaperConfig",
    "ConfigError",
    "load_config",
    "get_config",
    # Controller
    "generate_pdf",
    "generate_pdf_async",
    "GenerationResult",
    "Section",
    # Errors
    "RenderingError",
    "DegradedContentWarning",
]
