"""Exceptions raised by the catalog engine."""


class CatalogError(Exception):
    """Base class for catalog engine errors."""


class CatalogNotConfiguredError(CatalogError):
    """Raised when the engine is used without a remote catalog endpoint.

    This is the only failure surfaced to callers; every runtime data problem
    degrades instead.
    """


class CatalogRequestError(CatalogError):
    """A remote catalog call failed (status, transport or malformed body)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
