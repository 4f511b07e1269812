class StorageError(Exception):
    """
    Raised when the underlying data store fails (connection, timeout,
    corrupt record). Distinct from "not found", which is a plain None.
    """

    def __init__(self, message: str, *, operation: str = "unknown"):
        super().__init__(message)
        self.operation = operation
