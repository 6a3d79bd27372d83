"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration, including unknown year policies."""

    error_code = "CONFIG_ERROR"


class ContractError(PipelineError):
    """Raised when a validation report fails in strict mode."""

    error_code = "CONTRACT_ERROR"


class StageError(PipelineError):
    """Raised when a stage cannot find or read its inputs."""

    error_code = "STAGE_ERROR"
