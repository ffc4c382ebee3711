"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class SourceSchemaError(StageError):
    """Raised when a source extract lacks a column named in the site mapping."""

    error_code = "SOURCE_SCHEMA_ERROR"


class DegenerateStatisticsError(PipelineError):
    """Raised when a series is too short to yield meaningful statistics."""

    error_code = "DEGENERATE_STATISTICS"


class UndefinedComparisonError(DegenerateStatisticsError):
    """Raised when a percentage difference has no valid denominator."""

    error_code = "UNDEFINED_COMPARISON"
