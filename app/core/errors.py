"""
Error kinds of the hotel analysis flow.

Every error carries one human-readable message; the API layer shows it to
the caller as-is. Nothing here is retried.
"""


class AnalysisError(Exception):
    """Base for everything the orchestrator surfaces to the caller."""

    message = "An unexpected error occurred"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(AnalysisError):
    message = "You must be logged in to analyze hotels"


class PersistenceError(AnalysisError):
    """
    A store write was rejected.

    `stage` is one of "hotel", "features", "compliance", "sentiment" for the
    insert that failed, or "analysis" when every insert went through but the
    final commit did not.
    """

    STAGES = ("hotel", "features", "compliance", "sentiment", "analysis")

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"{stage} create failed")


class UnexpectedError(AnalysisError):
    pass


class StoreError(Exception):
    """Raised by HotelStore when the database rejects or loses a write."""

    def __init__(self, table: str, detail: str):
        self.table = table
        self.detail = detail
        super().__init__(f"{table}: {detail}")
