from typing import List, Callable
from dataclasses import dataclass
from types import TracebackType

from vaultdiff.messages import error


class VaultDiffError(Exception):
    """
    A fatal precondition failure. Aborts the whole run with exit status 1.
    """


class Callback:
    pass


@dataclass
class OnExitCallback(Callback):
    value: Callable[[], None]


@dataclass
class OnFailureCallback(Callback):
    value: Callable[[BaseException], None]


@dataclass
class OnSuccessCallback(Callback):
    value: Callable[[], None]


class Scope:
    """
    Runs deferred callbacks in reverse registration order when the block exits,
    whether it completes, raises, or is interrupted.
    """
    def __init__(self) -> None:
        self.deferred: List[Callback] = []

    def defer(self, fn: Callable[[], None]) -> None:
        self.deferred.append(OnExitCallback(fn))

    def on_exit(self, fn: Callable[[], None]) -> None:
        self.deferred.append(OnExitCallback(fn))

    def on_failure(self, fn: Callable[[BaseException], None]) -> None:
        self.deferred.append(OnFailureCallback(fn))

    def on_success(self, fn: Callable[[], None]) -> None:
        self.deferred.append(OnSuccessCallback(fn))

    def __enter__(self) -> 'Scope':
        assert len(self.deferred) == 0
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        deferred, self.deferred = self.deferred, []
        for fn in deferred[::-1]:
            match fn:
                case OnExitCallback(fn):
                    try:
                        fn()
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
                case OnFailureCallback(fn):
                    if value is None:
                        continue
                    try:
                        fn(value)
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
                case OnSuccessCallback(fn):
                    if exc_type is not None:
                        continue
                    try:
                        fn()
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
