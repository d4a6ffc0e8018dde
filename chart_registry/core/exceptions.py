class ChartRegistryError(Exception):
    """Base exception for the chart registry."""

    pass


class PersistenceError(ChartRegistryError):
    """Raised when the durable store cannot be read or written.

    The in-memory collection is left exactly as it was before the failed
    operation.
    """

    def __init__(self, organization_id: str, operation: str, cause: Exception | None = None):
        self.organization_id = organization_id
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Store {operation} failed for organization '{organization_id}'{detail}")


class GenerationError(ChartRegistryError):
    """Raised internally when a chart cannot be synthesized from a prompt."""

    pass
