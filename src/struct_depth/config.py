"""Configuration loading and management for struct-depth.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.struct-depth.toml)
    3. Project config (./struct-depth.toml)
    4. Explicit config file
    5. Environment variables (STRUCT_DEPTH_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, workers=4)
    >>> config.verbosity
    'verbose'
    >>> config.workers
    4
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, StructDepthError

Verbosity = Literal["quiet", "normal", "verbose"]

CONFIG_FILE_NAME = "struct-depth.toml"
ENV_PREFIX = "STRUCT_DEPTH_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis execution.

    Attributes:
        Extraction:
            follow_submodules: Follow ``mod name;`` declarations into their files
            skip_files_with_syntax_errors: Drop a file's declarations when its
                syntax tree contains error nodes
            include_unions: Treat ``union`` items as aggregates
            extra_builtin_types: Additional type names excluded from edges

        Performance tuning:
            parallel: Extract crate roots on a thread pool
            workers: Number of parallel workers (None = auto-detect)

        File filtering:
            exclude_dirs: Directory names never descended into
            max_file_size_mb: Maximum file size to analyze (MB)
            max_files: Maximum number of files to analyze
            allow_hidden_files: Include hidden files (starting with .)
            follow_symlinks: Follow symbolic links during scanning

        Remote retrieval:
            clone_depth: ``git clone --depth`` value (0 = full history)

        Output control:
            verbosity: Logging verbosity level
    """

    # Extraction
    follow_submodules: bool = True
    skip_files_with_syntax_errors: bool = True
    include_unions: bool = True
    extra_builtin_types: list[str] = field(default_factory=list)

    # Performance tuning
    parallel: bool = True
    workers: Optional[int] = None

    # File filtering
    exclude_dirs: list[str] = field(
        default_factory=lambda: [
            "target",
            ".git",
            "node_modules",
            "vendor",
            ".cargo",
            "third_party",
        ]
    )
    max_file_size_mb: float = 10.0
    max_files: int = 10000
    allow_hidden_files: bool = False
    follow_symlinks: bool = False

    # Remote retrieval
    clone_depth: int = 1

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")

        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")

        if self.clone_depth < 0:
            raise ValueError("clone_depth must be non-negative")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got '{self.verbosity}'")

        for name in self.extra_builtin_types:
            if not name or "<" in name:
                raise ValueError(f"extra_builtin_types entries must be plain type names: '{name}'")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are folded into ``verbosity``; ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        StructDepthError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise StructDepthError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise StructDepthError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise StructDepthError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise StructDepthError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise StructDepthError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from STRUCT_DEPTH_* environment variables.

    Every scalar field of AnalysisConfig can be set, e.g.
    ``STRUCT_DEPTH_WORKERS=4`` or ``STRUCT_DEPTH_PARALLEL=false``. List
    fields are only configurable from TOML.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field type is not settable from env

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return the parsed dict.

    A ``[struct-depth]`` table is used when present, otherwise the top level.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("struct-depth")
    if isinstance(section, dict):
        return section
    return data
