"""Configuration management for the Excel to PDF converter.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
EPC_ prefix, or via a .env file in the project root.

Environment Variables:
    EPC_ENABLE_PAGINATION: Split tall sheets over letter-height pages (default: false)
    EPC_FIXED_DECIMAL_PLACES: Decimals for fixed-point number formats (default: 2)
    EPC_MAX_PAGE_WIDTH: Maximum page width in points (default: 14400)
    EPC_MAX_PAGE_HEIGHT: Maximum page height in points (default: 14400)
    EPC_MIN_PAGE_WIDTH: Minimum page width in points (default: 612)
    EPC_MIN_PAGE_HEIGHT: Minimum page height in points (default: 792)
    EPC_ENFORCE_MINIMUM_SIZE: Raise small pages to the minimum size (default: false)
    EPC_ROW_HEIGHT: Row height in points (default: 25)
    EPC_MARGIN: Page margin in points (default: 50)
    EPC_PADDING: Horizontal cell padding in points (default: 10)
    EPC_EXTRA_SPACE: Extra width added to every measured cell (default: 10)
    EPC_DEFAULT_FONT_SIZE: Font size for cells without one (default: 11)
    EPC_PAGINATED_PAGE_HEIGHT: Page height when paginating (default: 792)
    EPC_FONT_FAMILY: Name for registered TrueType fonts (default: Body)
    EPC_FONT_REGULAR_PATH: TrueType file for the regular face
    EPC_FONT_BOLD_PATH: TrueType file for the bold face
    EPC_FONT_ITALIC_PATH: TrueType file for the italic face
    EPC_FONT_BOLD_ITALIC_PATH: TrueType file for the bold-italic face
    EPC_MAX_FILE_SIZE_MB: Maximum file upload size in MB (default: 10)
    EPC_LOG_LEVEL: Logging level (default: INFO)
    EPC_DEBUG: Enable debug mode (default: false)
    EPC_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    EPC_SERVER_HOST: Server bind host (default: 0.0.0.0)
    EPC_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from excel_pdf_converter.layout.fonts import FontRegistry
from excel_pdf_converter.layout.options import LayoutOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables prefixed with EPC_
    or via a .env file.

    Example .env file:
        EPC_ENABLE_PAGINATION=true
        EPC_LOG_LEVEL=DEBUG
        EPC_FONT_REGULAR_PATH=/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf
    """

    model_config = SettingsConfigDict(
        env_prefix="EPC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Layout Settings
    # =========================================================================

    enable_pagination: bool = False
    """Split tall sheets over pages of ``paginated_page_height`` points."""

    fixed_decimal_places: int = 2
    """Decimals used when a number format carries no explicit precision (0-20)."""

    max_page_width: float = 14400.0
    """Pages wider than this are capped to it."""

    max_page_height: float = 14400.0
    """Pages taller than this are capped to it and pagination is turned on."""

    min_page_width: float = 612.0
    """Minimum page width, applied when ``enforce_minimum_size`` is set."""

    min_page_height: float = 792.0
    """Minimum page height, applied when ``enforce_minimum_size`` is set."""

    enforce_minimum_size: bool = False
    """Raise small pages to the configured minimums."""

    row_height: float = 25.0
    """Height of every row in points."""

    margin: float = 50.0
    """Page margin on every side in points."""

    padding: float = 10.0
    """Starting width of every column and per-cell horizontal padding."""

    extra_space: float = 10.0
    """Slack added to every measured cell width."""

    default_font_size: float = 11.0
    """Font size for cells whose style has none."""

    paginated_page_height: float = 792.0
    """Page height used when pagination is enabled (US letter)."""

    # =========================================================================
    # Font Settings
    # =========================================================================

    font_family: str = "Body"
    """Family name under which TrueType faces are registered."""

    font_regular_path: Path | None = None
    """TrueType file for the regular face. Built-in Helvetica when unset."""

    font_bold_path: Path | None = None
    """TrueType file for the bold face."""

    font_italic_path: Path | None = None
    """TrueType file for the italic face."""

    font_bold_italic_path: Path | None = None
    """TrueType file for the bold-italic face."""

    # =========================================================================
    # File Upload Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum file upload size in megabytes."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging and error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("fixed_decimal_places")
    @classmethod
    def validate_decimal_places(cls, v: int) -> int:
        """Validate decimal places is in a printable range."""
        if not 0 <= v <= 20:
            raise ValueError(f"fixed_decimal_places must be between 0 and 20, got {v}")
        return v

    @field_validator(
        "max_page_width",
        "max_page_height",
        "min_page_width",
        "min_page_height",
        "row_height",
        "default_font_size",
        "paginated_page_height",
    )
    @classmethod
    def validate_positive_dimension(cls, v: float) -> float:
        """Validate page and row dimensions are positive."""
        if v <= 0:
            raise ValueError(f"Dimension must be positive, got {v}")
        return v

    @field_validator("margin", "padding", "extra_space")
    @classmethod
    def validate_spacing(cls, v: float) -> float:
        """Validate spacing values are not negative."""
        if v < 0:
            raise ValueError(f"Spacing must not be negative, got {v}")
        return v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    @model_validator(mode="after")
    def validate_page_limits(self) -> "Settings":
        """Validate minimum page dimensions do not exceed the maximums."""
        if self.min_page_width > self.max_page_width:
            raise ValueError(
                f"min_page_width ({self.min_page_width}) must not exceed "
                f"max_page_width ({self.max_page_width})"
            )
        if self.min_page_height > self.max_page_height:
            raise ValueError(
                f"min_page_height ({self.min_page_height}) must not exceed "
                f"max_page_height ({self.max_page_height})"
            )
        return self

    @model_validator(mode="after")
    def validate_font_paths(self) -> "Settings":
        """Validate either all four font faces are configured or none."""
        paths = self.font_paths()
        configured = [path for path in paths if path is not None]
        if configured and len(configured) != len(paths):
            raise ValueError(
                "Font paths must be set for all four faces "
                "(regular, bold, italic, bold_italic) or for none"
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    @property
    def uses_custom_fonts(self) -> bool:
        return self.font_regular_path is not None

    def font_paths(self) -> tuple[Path | None, ...]:
        return (
            self.font_regular_path,
            self.font_bold_path,
            self.font_italic_path,
            self.font_bold_italic_path,
        )

    def layout_options(self) -> LayoutOptions:
        """Build the layout engine options from these settings."""
        return LayoutOptions(
            enable_pagination=self.enable_pagination,
            fixed_decimal_places=self.fixed_decimal_places,
            max_page_width=self.max_page_width,
            max_page_height=self.max_page_height,
            min_page_width=self.min_page_width,
            min_page_height=self.min_page_height,
            enforce_minimum_size=self.enforce_minimum_size,
            row_height=self.row_height,
            margin=self.margin,
            padding=self.padding,
            extra_space=self.extra_space,
            default_font_size=self.default_font_size,
            paginated_page_height=self.paginated_page_height,
        )

    def font_registry(self) -> FontRegistry:
        """Build the font registry, registering TrueType faces when configured.

        Raises:
            reportlab.pdfbase.ttfonts.TTFError: If a configured file is not a font.
        """
        if not self.uses_custom_fonts:
            return FontRegistry.builtin()
        regular, bold, italic, bold_italic = self.font_paths()
        return FontRegistry.from_ttf_files(
            self.font_family,
            regular=regular,
            bold=bold,
            italic=italic,
            bold_italic=bold_italic,
        )

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging."""
        data = self.model_dump()
        for key, value in data.items():
            if isinstance(value, Path):
                data[key] = str(value)
        return data


def validate_settings_on_startup(s: Settings) -> None:
    """Validate settings on application startup.

    Emits warnings for configurations that work but are unlikely to be
    intended, and logs a configuration summary.

    Args:
        s: Settings instance to validate.

    Raises:
        ValueError: If a configured font file does not exist.
    """
    logger = logging.getLogger(__name__)

    if s.uses_custom_fonts:
        missing = [str(path) for path in s.font_paths() if path and not path.exists()]
        if missing:
            raise ValueError(f"Configured font files not found: {', '.join(missing)}")

    # Warn about permissive CORS in non-debug mode
    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    if s.enable_pagination and s.paginated_page_height > s.max_page_height:
        logger.warning(
            "paginated_page_height exceeds max_page_height; pages will be capped "
            "to max_page_height."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"max_file_size_mb={s.max_file_size_mb}, "
        f"enable_pagination={s.enable_pagination}, "
        f"custom_fonts={s.uses_custom_fonts}"
    )


# Create the global settings instance
settings = Settings()
