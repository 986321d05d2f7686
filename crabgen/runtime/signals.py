"""Signal delivery: the per-process delegate registry and per-module listeners"""

import functools
import itertools
import threading
from typing import Any, Callable, Dict, Optional

from ..logging import get_logger

logger = get_logger("runtime.signals")


class SignalRegistry:
    """Routes a signal raised by a host instance to the bridge object that owns it.

    Keyed by object identity. Passed explicitly to each module so tests and
    embedders can run isolated registries side by side.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._delegates: Dict[int, Callable[[str], None]] = {}

    def register(self, object_id: int, delegate: Callable[[str], None]):
        """Install `delegate`, replacing any earlier one for the same id"""
        with self._lock:
            self._delegates[object_id] = delegate

    def unregister(self, object_id: int):
        with self._lock:
            self._delegates.pop(object_id, None)

    def is_registered(self, object_id: int) -> bool:
        with self._lock:
            return object_id in self._delegates

    def emit(self, object_id: int, name: str) -> bool:
        """Deliver `name` to the delegate for `object_id`; False if none is registered"""
        with self._lock:
            delegate = self._delegates.get(object_id)
        if delegate is None:
            return False
        delegate(name)
        return True


class ListenerRegistry:
    """Event name -> listeners, with monotonically increasing listener ids"""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count()
        self._listeners: Dict[str, Dict[int, Callable[..., Any]]] = {}

    def subscribe(self, name: str, listener: Callable[..., Any]) -> Callable[[], None]:
        """Add a listener; the returned callable removes it and is safe to call twice"""
        with self._lock:
            listener_id = next(self._ids)
            self._listeners.setdefault(name, {})[listener_id] = listener

        def unsubscribe():
            with self._lock:
                self._listeners.get(name, {}).pop(listener_id, None)

        return unsubscribe

    def snapshot(self, name: str) -> list:
        with self._lock:
            return list(self._listeners.get(name, {}).values())

    def count(self, name: str) -> int:
        with self._lock:
            return len(self._listeners.get(name, {}))

    def emit(self, name: str, *args, invoker: Optional[Callable[[Callable[[], None]], None]] = None) -> int:
        """Deliver to every listener registered when emission began; returns how many.

        Listeners run outside the lock, so they may subscribe or unsubscribe
        re-entrantly. With an `invoker`, each call is handed to it instead of
        running inline. A failing listener is logged and never reaches the emitter.
        """
        listeners = self.snapshot(name)
        for listener in listeners:
            call = functools.partial(self._call, name, listener, args)
            if invoker is None:
                call()
            else:
                invoker(call)
        return len(listeners)

    @staticmethod
    def _call(name: str, listener: Callable[..., Any], args: tuple):
        try:
            listener(*args)
        except Exception as e:
            logger.warning("Listener error on '%s': %s", name, e)

    def clear(self):
        with self._lock:
            self._listeners.clear()
