"""Settings validator for elm-test."""

from .schema import (
    RunnerSettings,
    ValidationError,
    ValidationResult,
    VALID_REPORT_FORMATS,
)


def validate_settings(settings: RunnerSettings) -> ValidationResult:
    """Validate parsed RunnerSettings.

    Args:
        settings: Settings to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if not isinstance(settings.compiler, str) or not settings.compiler:
        errors.append(ValidationError(
            path="compiler",
            message="'compiler' must be a non-empty string.",
        ))

    _validate_worker_command(settings, errors)

    if settings.workers is not None and not _is_positive_int(settings.workers):
        errors.append(ValidationError(
            path="workers",
            message=f"'workers' must be a positive integer, got {settings.workers!r}.",
        ))

    if not _is_positive_int(settings.fuzz):
        errors.append(ValidationError(
            path="fuzz",
            message=f"'fuzz' must be a positive integer, got {settings.fuzz!r}.",
        ))

    if settings.seed is not None and (
        isinstance(settings.seed, bool) or not isinstance(settings.seed, int)
    ):
        errors.append(ValidationError(
            path="seed",
            message=f"'seed' must be an integer, got {settings.seed!r}.",
        ))

    if settings.report not in VALID_REPORT_FORMATS:
        errors.append(ValidationError(
            path="report",
            message=f"Invalid report '{settings.report}'. Must be one of: {', '.join(sorted(VALID_REPORT_FORMATS))}",
        ))

    if not isinstance(settings.interfaces_dir, str) or not settings.interfaces_dir:
        errors.append(ValidationError(
            path="interfaces_dir",
            message="'interfaces_dir' must be a non-empty string.",
        ))

    if settings.seed is not None:
        warnings.append(ValidationError(
            path="seed",
            message="A fixed seed in the settings file makes every run use the same fuzz inputs.",
            severity="warning",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_worker_command(
    settings: RunnerSettings,
    errors: list[ValidationError],
) -> None:
    command = settings.worker_command
    if not isinstance(command, list) or not command:
        errors.append(ValidationError(
            path="worker_command",
            message="'worker_command' must be a non-empty list.",
        ))
        return

    for i, part in enumerate(command):
        if not isinstance(part, str) or not part:
            errors.append(ValidationError(
                path=f"worker_command[{i}]",
                message="Each part of 'worker_command' must be a non-empty string.",
            ))


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
