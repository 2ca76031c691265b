from __future__ import annotations


class WriteError(RuntimeError):
    """The store rejected a single record (constraint violation, lost connection, ...)."""

    def __init__(self, table: str, key: str, cause: BaseException) -> None:
        super().__init__(f"{table} {key}: {cause.__class__.__name__}: {cause}")
        self.table = table
        self.key = key
        self.cause = cause
