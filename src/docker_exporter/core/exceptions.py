"""Custom exceptions used by the exporter."""


class ExporterError(RuntimeError):
    """Base class for exporter errors."""


class GatewayUnavailableError(ExporterError):
    """Raised when the Docker daemon cannot be reached at start-up."""


class DiscoveryError(ExporterError):
    """Raised when the container list cannot be fetched; aborts the cycle."""


class TaskTimeoutError(ExporterError):
    """Raised when a per-container task exceeds its deadline."""


class StatsDecodeError(ExporterError):
    """Raised when a stats document is not a JSON object."""
