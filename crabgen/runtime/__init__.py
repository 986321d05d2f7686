"""
In-process rendition of the generated bridge runtime.

Hosts module implementations written in Python behind the same contract
the generated C++ module follows: arity-checked dispatch, listener
registries, signal routing and an owned worker pool torn down once.
"""

from .module import HostModule, NativeModule
from .signals import ListenerRegistry, SignalRegistry
from .thread_pool import ThreadPool

__all__ = ['HostModule', 'NativeModule', 'ListenerRegistry', 'SignalRegistry', 'ThreadPool']
