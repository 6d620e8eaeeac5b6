"""
Configuration module for the form builder.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class FormBuilderConfig:
    """Configuration settings for the form builder."""

    # Form store settings
    store_path: str = ".form_builder"
    current_form_key: str = "currentForm"
    saved_forms_key: str = "savedForms"

    # Tracing settings
    enable_tracing: bool = False
    trace_to_console: bool = False
    trace_file: str | None = None

    # Logging settings
    log_level: str = "INFO"

    # Output settings
    indent_json_output: int = 2
    verbose_output: bool = False

    @classmethod
    def from_env(cls) -> "FormBuilderConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            store_path=os.getenv("FORM_BUILDER_STORE_PATH", _defaults.store_path),
            current_form_key=os.getenv("FORM_BUILDER_CURRENT_FORM_KEY", _defaults.current_form_key),
            saved_forms_key=os.getenv("FORM_BUILDER_SAVED_FORMS_KEY", _defaults.saved_forms_key),
            enable_tracing=os.getenv("FORM_BUILDER_ENABLE_TRACING", str(_defaults.enable_tracing).lower()).lower() == "true",
            trace_to_console=os.getenv("FORM_BUILDER_TRACE_TO_CONSOLE", str(_defaults.trace_to_console).lower()).lower() == "true",
            trace_file=os.getenv("FORM_BUILDER_TRACE_FILE", _defaults.trace_file),
            log_level=os.getenv("FORM_BUILDER_LOG_LEVEL", _defaults.log_level).upper(),
            indent_json_output=int(os.getenv("FORM_BUILDER_INDENT_JSON", str(_defaults.indent_json_output))),
            verbose_output=os.getenv("FORM_BUILDER_VERBOSE_OUTPUT", str(_defaults.verbose_output).lower()).lower() == "true",
        )


config = FormBuilderConfig.from_env()


def get_config() -> FormBuilderConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormBuilderConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
