"""
Unit of Work Lifecycle.

Signals the host fires at the end of a request or command and right
before a redirect response, which sync managers hook to flush their queues.
"""

import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

ShutdownCallback = Callable[[], Any]
RedirectFilter = Callable[[Any], Any]


class UnitOfWork:
    """
    Lifecycle signals for one bounded execution scope.

    Shutdown fires at most once, either through an explicit shutdown()
    call or when leaving the ``with`` block. Redirect filters may fire any
    number of times before that.
    """

    def __init__(self, name: str = "unit-of-work"):
        self.name = name
        self._shutdown_callbacks: List[ShutdownCallback] = []
        self._redirect_filters: List[RedirectFilter] = []
        self._shut_down = False

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    def on_shutdown(self, callback: ShutdownCallback) -> ShutdownCallback:
        """Register a callback run when the unit of work ends"""
        self._shutdown_callbacks.append(callback)
        return callback

    def on_redirect(self, redirect_filter: RedirectFilter) -> RedirectFilter:
        """Register a filter run before a redirect; it must return the location"""
        self._redirect_filters.append(redirect_filter)
        return redirect_filter

    def redirect(self, location: Any) -> Any:
        """
        Signal an outgoing redirect.

        Args:
            location: Redirect target

        Returns:
            The location after passing through every redirect filter
        """
        logger.debug(f"{self.name}: redirect to {location}")
        for redirect_filter in list(self._redirect_filters):
            location = redirect_filter(location)
        return location

    def shutdown(self) -> None:
        """Signal the end of the unit of work"""
        if self._shut_down:
            return

        self._shut_down = True
        logger.debug(f"{self.name}: shutting down ({len(self._shutdown_callbacks)} callbacks)")
        for callback in list(self._shutdown_callbacks):
            callback()

    def __enter__(self) -> 'UnitOfWork':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]:
        self.shutdown()
        return None
