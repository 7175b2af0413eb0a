import itertools
import threading
from collections.abc import Callable
from typing import Protocol

ThreadFactory = Callable[[Callable[[], None]], threading.Thread]


class NamedThreadCreator(Protocol):
    """Supplies thread factories whose threads carry a recognisable name."""

    def create_thread_with_name(self, name: str) -> ThreadFactory: ...


class DaemonThreadCreator:
    """
    Creates unstarted daemon threads.

    The first thread of a factory is called ``name``; later ones get a
    ``-<n>`` suffix so thread dumps stay readable.
    """

    def create_thread_with_name(self, name: str) -> ThreadFactory:
        counter = itertools.count()

        def factory(target: Callable[[], None]) -> threading.Thread:
            n = next(counter)
            thread_name = name if n == 0 else f"{name}-{n}"
            return threading.Thread(target=target, name=thread_name, daemon=True)

        return factory
