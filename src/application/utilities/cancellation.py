"""Cooperative cancellation for long-running batch operations."""

from attrs import define, field


@define(slots=True)
class CancellationToken:
    """Stop flag checked by batch loops between items.

    Cancellation is cooperative: work already in flight completes, the loop
    stops before starting the next item.
    """

    _cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
