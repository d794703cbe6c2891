"""Configuration management

YAML configuration file loading and filter configuration validation.
"""

from .settings import (
    ExtractorConfig,
    FilterConfig,
    LoggingConfig,
    OutputConfig,
    build_config,
    build_filter_config,
    load_config_file,
    merge_config,
    parse_extensions,
    resolve_log_level,
)

__all__ = [
    "ExtractorConfig",
    "FilterConfig",
    "LoggingConfig",
    "OutputConfig",
    "build_config",
    "build_filter_config",
    "load_config_file",
    "merge_config",
    "parse_extensions",
    "resolve_log_level",
]
