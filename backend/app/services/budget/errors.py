"""Budget engine errors. Routers map status_code onto HTTPException."""


class BudgetError(Exception):
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BudgetError):
    """Unknown category, event type, package or location."""
    status_code = 404


class InvalidInputError(BudgetError):
    """Negative counts, malformed dates, plans a package cannot apply to."""
    status_code = 422


class UpstreamUnavailableError(BudgetError):
    """Catalog or persistence collaborator failed. Not retried here."""
    status_code = 503


class ConflictError(BudgetError):
    """Concurrent tracking write to the same key under the strict policy."""
    status_code = 409
