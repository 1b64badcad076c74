from __future__ import annotations

from typing import Any, Callable, List

Callback = Callable[..., Any]


class Observable:
    """Minimal change-notification hook for core state holders.

    Subscribers are called synchronously, in subscription order, after the
    state they observe has been fully updated.
    """

    def __init__(self) -> None:
        self._subscribers: List[Callback] = []

    def subscribe(self, callback: Callback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, *args: Any) -> None:
        for callback in list(self._subscribers):
            callback(*args)
