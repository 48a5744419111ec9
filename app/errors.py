class DashboardError(Exception):
    """Base class for failures that abort a /api/stats request.

    The message is returned to the client as-is, so keep it short and free of
    credentials.
    """


class SamplingError(DashboardError):
    """CPU/RAM sampling produced no usable measurement."""


class CollaboratorError(DashboardError):
    """An inventory or host identity lookup failed."""


class StatsTimeoutError(DashboardError):
    """Assembling the stats response took longer than the configured timeout."""
