"""Listener registry for locale-change and missing-translation events.

Listeners are called synchronously in registration order. A listener that
raises is logged and skipped; the remaining listeners still run and the
error never reaches the code that triggered the notification.
"""

from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from linguakit.core.logging import get_module_logger
from linguakit.i18n.errors import I18nArgumentError

logger = get_module_logger()

CHANGE_EVENT = "locale.changed"
MISSING_EVENT = "translation.missing"


class ListenerSet:
    """Insertion-ordered set of callbacks for one event type.

    Registering the same callback twice keeps a single entry.
    """

    def __init__(self, event_type: str):
        self.event_type = event_type
        self._listeners: Dict[Callable[..., Any], None] = {}
        self._lock = RLock()

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, callback: Callable[..., Any]) -> Callable[[], None]:
        """Register a listener and return its unsubscribe function.

        The unsubscribe function is idempotent.

        Raises:
            I18nArgumentError: If callback is not callable.
        """
        if not callable(callback):
            raise I18nArgumentError("callback must be callable")

        with self._lock:
            self._listeners[callback] = None
            total = len(self._listeners)

        logger.debug(
            "registered_listener",
            event_type=self.event_type,
            listener=getattr(callback, "__name__", "unknown"),
            total_listeners=total,
        )

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(callback, None)

        return unsubscribe

    def snapshot(self) -> List[Callable[..., Any]]:
        with self._lock:
            return list(self._listeners)

    def notify(self, *args: Any) -> Optional[Exception]:
        """Call every listener with ``args``, isolating failures.

        Listeners added during notification wait for the next one. Listeners
        removed during notification are skipped if they have not run yet.

        Returns:
            The last exception raised by a listener, or None.
        """
        last_error = None
        for listener in self.snapshot():
            with self._lock:
                if listener not in self._listeners:
                    continue
            try:
                listener(*args)
            except Exception as e:
                last_error = e
                logger.error(
                    "listener_failed",
                    listener=getattr(listener, "__name__", "unknown"),
                    event_type=self.event_type,
                    error=str(e),
                )
        return last_error


class EventHub:
    """Change and missing-translation listeners for one i18n instance.

    Attributes:
        change: Listeners called with (new_locale, previous_locale).
        missing: Listeners called with (key, current_locale).
        last_error: Most recent exception swallowed from any listener.
    """

    def __init__(self):
        self.change = ListenerSet(CHANGE_EVENT)
        self.missing = ListenerSet(MISSING_EVENT)
        self.last_error: Optional[Exception] = None

    def on_change(self, callback: Callable[[str, str], Any]) -> Callable[[], None]:
        return self.change.add(callback)

    def on_missing(self, callback: Callable[[str, str], Any]) -> Callable[[], None]:
        return self.missing.add(callback)

    def emit_change(self, new_locale: str, previous_locale: str) -> None:
        self._emit(self.change, new_locale, previous_locale)

    def emit_missing(self, key: str, locale: str) -> None:
        self._emit(self.missing, key, locale)

    def _emit(self, listeners: ListenerSet, *args: Any) -> None:
        error = listeners.notify(*args)
        if error is not None:
            self.last_error = error
