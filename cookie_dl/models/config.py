"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from cookie_dl.browser.types import BrowserType

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:138.0) Gecko/20100101 Firefox/138.0"
)


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    # Cookie Source
    browser: BrowserType | None = None
    browser_fallback: bool = True
    use_cookies: bool = True

    # Download Settings
    max_workers: int = 4
    output_dir: str = "."
    user_agent: str = DEFAULT_USER_AGENT
    dry_run: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)
    source_urls: list[str] = Field(default_factory=list, repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("browser", mode="before")
    @classmethod
    def validate_browser(cls, v: Any) -> BrowserType | None:
        """
        Parses a browser name. Unknown or empty names raise the matching
        BrowserError unchanged so callers can tell the two apart.
        """
        if v is None or isinstance(v, BrowserType):
            return v
        return BrowserType.parse(str(v))

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        if not v:
            raise ValueError("Output directory cannot be empty.")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        if not v:
            raise ValueError("User agent cannot be empty.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "source_urls", "dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
