from __future__ import annotations


class SyncValidationError(ValueError):
    """Input rejected before any store or network call."""


class NotFoundError(LookupError):
    def __init__(self, resource: str, identifier: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        message = f'{resource} not found'
        if identifier:
            message = f'{message}: {identifier}'
        super().__init__(message)


class StoreError(RuntimeError):
    """A store read or write failed."""

    def __init__(self, operation: str, message: str = '', *, transient: bool = False) -> None:
        self.operation = operation
        self.transient = transient
        super().__init__(message or f'Store operation failed: {operation}')


class AIHelperError(RuntimeError):
    pass
