"""In-process bridge object with the same contract as the generated C++ module"""

import threading
from typing import Any, Callable, Optional, Type

from ..errors import BridgeError
from ..logging import get_logger
from ..naming import sanitize_str
from ..types import Schema
from .signals import ListenerRegistry, SignalRegistry
from .thread_pool import DEFAULT_NUM_THREADS, ThreadPool

logger = get_logger("runtime.module")

Invoker = Callable[[Callable[[], None]], None]


def _call_inline(task: Callable[[], None]):
    task()


class HostModule:
    """Base class for host implementations hosted by `NativeModule`.

    Methods are looked up by their sanitized (snake_case) name. Omitted
    optional arguments arrive as None.
    """

    def __init__(self, module_id: int, signals: SignalRegistry):
        self._module_id = module_id
        self._signals = signals

    @property
    def module_id(self) -> int:
        return self._module_id

    def emit(self, signal: str) -> bool:
        return self._signals.emit(self._module_id, signal)


class NativeModule:
    """Owns one host instance and dispatches calls, listeners and background work"""

    def __init__(
        self,
        schema: Schema,
        host_cls: Type[HostModule],
        signals: Optional[SignalRegistry] = None,
        invoker: Optional[Invoker] = None,
        num_threads: int = DEFAULT_NUM_THREADS,
    ):
        self.schema = schema
        self.name = schema.module_name
        self._signals = signals if signals is not None else SignalRegistry()
        self._invoker = invoker or _call_inline
        self._listeners = ListenerRegistry()
        self._pool = ThreadPool(num_threads)
        self._lock = threading.Lock()
        self._invalidated = False

        self._methods = {m.name: m for m in schema.methods}
        self._signal_names = {s.name for s in schema.signals}
        self._host = host_cls(id(self), self._signals)
        if self._signal_names:
            self._signals.register(id(self), self._on_signal)

    @property
    def invalidated(self) -> bool:
        with self._lock:
            return self._invalidated

    @property
    def host(self) -> HostModule:
        return self._host

    def call(self, name: str, *args) -> Any:
        """Invoke a method on the host; failures surface as BridgeError"""
        method = self._methods.get(name)
        if method is None:
            raise BridgeError(f"Unknown method: {name}", {'module': self.name})
        if self.invalidated:
            raise BridgeError(f"{self.name} has been invalidated", {'module': self.name, 'method': name})

        total = len(method.params)
        required = method.required_arity
        if not required <= len(args) <= total:
            expected = total if required == total else f"{required} to {total}"
            raise BridgeError(f"Expected {expected} arguments", {'module': self.name, 'method': name})

        fn = getattr(self._host, sanitize_str(name))
        padded = args + (None,) * (total - len(args))
        try:
            return fn(*padded)
        except BridgeError:
            raise
        except Exception as err:
            raise BridgeError(str(err), {'module': self.name, 'method': name}) from err

    def call_async(self, name: str, *args, callback: Callable[[Any, Optional[BridgeError]], None]) -> bool:
        """Run `call` on the worker pool and hand (result, error) to `callback` via the invoker.

        Returns False if the module is invalidated and the work was dropped.
        """
        def task():
            try:
                result, error = self.call(name, *args), None
            except BridgeError as err:
                result, error = None, err
            self._invoker(lambda: callback(result, error))

        return self._pool.enqueue(task)

    def add_listener(self, signal: str, listener: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to a signal; the returned cleanup is idempotent"""
        if signal not in self._signal_names:
            raise BridgeError(f"Unknown signal: {signal}", {'module': self.name})
        return self._listeners.subscribe(signal, listener)

    def listener_count(self, signal: str) -> int:
        return self._listeners.count(signal)

    def _on_signal(self, name: str):
        if self.invalidated:
            return
        self._listeners.emit(name, invoker=self._invoker)

    def invalidate(self) -> bool:
        """Tear down exactly once; later calls return False"""
        with self._lock:
            if self._invalidated:
                return False
            self._invalidated = True
        self._listeners.clear()
        if self._signal_names:
            self._signals.unregister(id(self))
        self._pool.shutdown()
        logger.debug("Invalidated %s", self.name)
        return True
