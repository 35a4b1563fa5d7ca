"""
Module: builder.config

Purpose:
    Configuration dataclasses for paper generation. Immutable settings for
    page size, margins, columns, fonts and the per-content-type overflow
    buffers used by the layout engine. Read once at startup and shared
    by every request.

Key Classes:
    - Margins: Page margins in points
    - FontRoles: Font names for the regular/bold/italic roles
    - FontSizes: Size presets (title/header/sub_header/normal/small)
    - LayoutThresholds: Overflow buffers and fixed layout constants
    - PaperConfig: Main configuration
    - ConfigError: Invalid configuration

Key Functions:
    - load_config(): Build a PaperConfig from a JSON file
    - get_config(): Process-wide configuration (cached)

Dependencies:
    - reportlab.lib.pagesizes: Named page sizes
    - json, os (std)

Used By:
    - builder.controller: Document assembly
    - builder.layout.cursor: Page geometry
    - api.server / cli: Startup
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from reportlab.lib import pagesizes

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PAPER_TOOLKIT_CONFIG"

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A3": pagesizes.A3,
    "A4": pagesizes.A4,
    "A5": pagesizes.A5,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
}

# 10 MB, matching the request body limit of the HTTP layer
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


@dataclass(frozen=True)
class Margins:
    """Page margins in points."""

    top: float = 50
    bottom: float = 50
    left: float = 40
    right: float = 40


@dataclass(frozen=True)
class FontRoles:
    """Font names for each text role (standard PDF fonts, no embedding)."""

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"

    def resolve(self, role: str) -> str:
        try:
            return getattr(self, role)
        except AttributeError:
            raise ConfigError(f"Unknown font role: {role!r}") from None


@dataclass(frozen=True)
class FontSizes:
    """Font size presets in points."""

    title: float = 16
    header: float = 12
    sub_header: float = 10
    normal: float = 10
    small: float = 8


@dataclass(frozen=True)
class LayoutThresholds:
    """
    Overflow buffers and fixed layout constants.

    The buffers are per content type: a question column wraps when fewer
    than ``question_buffer`` points remain, an answer-key page breaks when
    the next row plus ``answer_row_buffer`` passes the bottom margin, and
    a solution block starts a new page when fewer than ``solution_buffer``
    points remain.
    """

    question_buffer: float = 70
    answer_row_buffer: float = 40
    solution_buffer: float = 150
    answer_row_height: float = 20
    answers_per_row: int = 4
    answer_cell_padding: float = 5
    option_indent: float = 15
    logo_width: float = 100
    logo_title_offset: float = 30
    excerpt_length: int = 60
    image_max_height: float = 200


@dataclass(frozen=True)
class PaperConfig:
    """
    Configuration for paper generation (immutable).

    Attributes:
        page_size: Named page size ("A4", "LETTER", ...)
        margins: Page margins
        columns: Column count of the question section (must be 2)
        column_gap: Horizontal gap between the two columns
        fonts: Font roles
        font_sizes: Font size presets
        line_height_factor: Line height as a multiple of the font size
        thresholds: Overflow buffers and fixed constants
        max_image_bytes: Largest logo/question image that will be read
        max_body_bytes: Largest request body accepted by the HTTP layer
        asset_root: Directory that logo and question image paths must lie
            in; None allows any readable path (the HTTP server always sets one)
        keywords: Document metadata keywords

    Example:
        >>> config = PaperConfig()
        >>> round(config.column_width, 2)
        247.64
    """

    page_size: str = "A4"
    margins: Margins = field(default_factory=Margins)
    columns: int = 2
    column_gap: float = 20
    fonts: FontRoles = field(default_factory=FontRoles)
    font_sizes: FontSizes = field(default_factory=FontSizes)
    line_height_factor: float = 1.2
    thresholds: LayoutThresholds = field(default_factory=LayoutThresholds)
    max_image_bytes: int = DEFAULT_MAX_BYTES
    max_body_bytes: int = DEFAULT_MAX_BYTES
    asset_root: Optional[str] = None
    keywords: str = "education, exam, questions"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_size.upper() not in PAGE_SIZES:
            raise ConfigError(
                f"Unsupported page_size {self.page_size!r} "
                f"(expected one of {sorted(PAGE_SIZES)})"
            )
        if self.columns != 2:
            raise ConfigError(f"columns must be 2: {self.columns}")
        if self.column_gap < 0:
            raise ConfigError(f"column_gap must be non-negative: {self.column_gap}")
        if self.line_height_factor <= 0:
            raise ConfigError(f"line_height_factor must be positive: {self.line_height_factor}")
        if self.thresholds.answers_per_row <= 0:
            raise ConfigError("answers_per_row must be positive")
        if self.content_width <= 0:
            raise ConfigError("Margins exceed page width")
        if self.content_height <= 0:
            raise ConfigError("Margins exceed page height")
        if self.column_width <= self.thresholds.option_indent:
            raise ConfigError("column_gap leaves no room for question columns")

    @property
    def page_dimensions(self) -> tuple[float, float]:
        """(width, height) in points."""
        return PAGE_SIZES[self.page_size.upper()]

    @property
    def content_width(self) -> float:
        """Width between the left and right margins."""
        return self.page_dimensions[0] - self.margins.left - self.margins.right

    @property
    def content_height(self) -> float:
        """Height between the top and bottom margins."""
        return self.page_dimensions[1] - self.margins.top - self.margins.bottom

    @property
    def column_width(self) -> float:
        """Width of one question column."""
        return (self.content_width - self.column_gap) / self.columns

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_height_factor


# ─────────────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────────────

_NESTED = {
    "margins": Margins,
    "fonts": FontRoles,
    "font_sizes": FontSizes,
    "thresholds": LayoutThresholds,
}

# camelCase aliases accepted in config files
_ALIASES = {
    "pageSize": "page_size",
    "columnGap": "column_gap",
    "fontSize": "font_sizes",
    "fontSizes": "font_sizes",
    "subHeader": "sub_header",
    "lineHeightFactor": "line_height_factor",
    "maxImageBytes": "max_image_bytes",
    "maxBodyBytes": "max_body_bytes",
    "assetRoot": "asset_root",
}


def _build(cls: type, data: dict[str, Any], path: str) -> Any:
    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown config key: {path}{key}")
        nested = _NESTED.get(name) if cls is PaperConfig else None
        if nested is not None:
            if not isinstance(value, dict):
                raise ConfigError(f"{path}{key} must be an object")
            value = _build(nested, value, f"{path}{key}.")
        kwargs[name] = value
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ConfigError(f"Invalid config at {path or 'root'}: {e}") from e


def config_from_dict(data: dict[str, Any]) -> PaperConfig:
    """Build a PaperConfig from a (partial) dictionary; missing keys use defaults."""
    if not isinstance(data, dict):
        raise ConfigError("Config must be a JSON object")
    return _build(PaperConfig, data, "")


def load_config(path: Optional[Path] = None) -> PaperConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: JSON file. None returns the defaults.

    Returns:
        PaperConfig

    Raises:
        ConfigError: If the file cannot be read or contains invalid values
    """
    if path is None:
        return PaperConfig()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is corrupted: {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    config = config_from_dict(data)
    logger.info(f"Loaded config from {path} (page size {config.page_size})")
    return config


@lru_cache(maxsize=1)
def get_config() -> PaperConfig:
    """
    Process-wide configuration.

    Reads the file named by PAPER_TOOLKIT_CONFIG once; defaults otherwise.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return load_config(Path(env_path) if env_path else None)


def with_overrides(config: PaperConfig, **changes: Any) -> PaperConfig:
    """Return a copy of ``config`` with top-level fields replaced."""
    return replace(config, **changes)
