"""Core domain types and logic."""

from .config import ConfigError, RegistryConfig, ReleaseConfig, load_release_config, resolve_registry
from .errors import ErrorCode
from .jsonc import JsonError, read_json, strip_json_comments
from .project import Project, detect_project
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "RegistryConfig",
    "ReleaseConfig",
    "load_release_config",
    "resolve_registry",
    # errors
    "ErrorCode",
    # jsonc
    "JsonError",
    "read_json",
    "strip_json_comments",
    # project
    "Project",
    "detect_project",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
