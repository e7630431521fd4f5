# src/eunit_runner/config/__init__.py

"""Configuration handling for eunit-runner.

This module provides configuration loading, validation, and resolution.
"""

from .config_loader import (
    find_config,
    find_config_in_dir,
    load_and_validate_config,
    load_and_validate_file,
    load_config,
)
from .config_resolve import (
    SWITCH_DEFAULTS,
    derive_eunit_config,
    resolve_options,
    resolve_project_config,
    switch_default,
)
from .config_types import (
    CoverConfig,
    CoverOptions,
    EunitOptions,
    OriginType,
    ProjectConfig,
    ProjectConfigResolved,
    SwitchName,
)
from .config_validate import ValidationSummary, validate_config


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "find_config_in_dir",
    "load_and_validate_config",
    "load_and_validate_file",
    "load_config",
    # config_resolve
    "SWITCH_DEFAULTS",
    "derive_eunit_config",
    "resolve_options",
    "resolve_project_config",
    "switch_default",
    # config_types
    "CoverConfig",
    "CoverOptions",
    "EunitOptions",
    "OriginType",
    "ProjectConfig",
    "ProjectConfigResolved",
    "SwitchName",
    # config_validate
    "ValidationSummary",
    "validate_config",
]
