class StoreError(Exception):
    """Raised when an insert, update, delete, select or upload fails in the hosted store."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
