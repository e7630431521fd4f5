# tests/utils/config_validate.py

from eunit_runner.config.config_validate import ValidationSummary


def make_summary(
    *,
    valid: bool = True,
    errors: list[str] | None = None,
    strict_warnings: list[str] | None = None,
    warnings: list[str] | None = None,
    strict: bool = True,
) -> ValidationSummary:
    """Helper to create a clean ValidationSummary."""
    return ValidationSummary(
        valid=valid,
        errors=errors or [],
        strict_warnings=strict_warnings or [],
        warnings=warnings or [],
        strict=strict,
    )
