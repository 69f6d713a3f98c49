"""Root of the relsync error hierarchy."""


class ReconcileError(Exception):
    """Base class for failures of a lifecycle operation."""
