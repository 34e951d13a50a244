"""Cancellation, deadlines and request-scoped values passed down call chains."""

from __future__ import annotations

import threading
import time
import weakref
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union

from . import errors

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"

DurationLike = Union[timedelta, float, int]
CancelFunc = Callable[[], None]

_SLEEP_POLL = 0.01
_WAIT_POLL = 0.001


class ContextError(errors.SimpleError):
    """Why a context was canceled; equal to any context error with the same text."""

    def is_equal_to(self, other: Optional[errors.Error]) -> bool:
        return isinstance(other, ContextError) and other.message == self.message


ERR_CANCELED = ContextError(CANCELED)
ERR_DEADLINE_EXCEEDED = ContextError(DEADLINE_EXCEEDED)


def _seconds(duration: DurationLike) -> float:
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def _now_like(moment: datetime) -> datetime:
    return datetime.now(moment.tzinfo) if moment.tzinfo else datetime.now()


def _remaining(deadline: datetime) -> float:
    return (deadline - _now_like(deadline)).total_seconds()


_NEVER_DONE = threading.Event()


class Context(ABC):
    """Carries a deadline, a cancellation signal and values."""

    @abstractmethod
    def deadline(self) -> Optional[datetime]:
        """Return the deadline, or None if there is none."""

    @abstractmethod
    def done(self) -> threading.Event:
        """Return an event that is set once the context is canceled."""

    @abstractmethod
    def err(self) -> Optional[ContextError]:
        """Return why the context was canceled, or None while it is live."""

    @abstractmethod
    def value(self, key: Any) -> Any:
        """Return the value stored under ``key``; raise KeyError if absent."""


class CancelContext(Context):
    """A context that can be canceled, together with its children."""

    def __init__(self, parent: Optional[Context] = None) -> None:
        self._parent = parent
        self._lock = threading.Lock()
        self._canceled = False
        self._reason = ""
        self._done = threading.Event()
        self._children: list[weakref.ReferenceType[CancelContext]] = []

    def deadline(self) -> Optional[datetime]:
        return self._parent.deadline() if self._parent is not None else None

    def done(self) -> threading.Event:
        return self._done

    def err(self) -> Optional[ContextError]:
        with self._lock:
            return ContextError(self._reason) if self._canceled else None

    def value(self, key: Any) -> Any:
        if self._parent is not None:
            return self._parent.value(key)
        raise KeyError("key not found")

    def cancel(self, reason: str = CANCELED) -> None:
        """Cancel this context and every child; later calls have no effect."""
        with self._lock:
            if self._canceled:
                return
            self._canceled = True
            self._reason = reason
            self._done.set()
            children = [ref() for ref in self._children]
            self._children = []
        for child in children:
            if child is not None:
                child.cancel(reason)

    def add_child(self, child: "CancelContext") -> None:
        """Register a child to be canceled with this context."""
        with self._lock:
            if not self._canceled:
                self._children = [r for r in self._children if r() is not None]
                self._children.append(weakref.ref(child))
                return
            reason = self._reason
        child.cancel(reason)

    def is_canceled(self) -> bool:
        """Return True once the context has been canceled."""
        return self._canceled


class TimerContext(CancelContext):
    """A cancelable context that cancels itself at its deadline."""

    def __init__(
        self, parent: Optional[Context], deadline: Union[datetime, DurationLike]
    ) -> None:
        super().__init__(parent)
        if isinstance(deadline, datetime):
            self._deadline = deadline
        else:
            self._deadline = datetime.now(timezone.utc) + timedelta(
                seconds=_seconds(deadline)
            )
        self._timer: Optional[threading.Timer] = None
        delay = _remaining(self._deadline)
        if delay <= 0:
            super().cancel(DEADLINE_EXCEEDED)
            return
        self_ref = weakref.ref(self)

        def expire() -> None:
            ctx = self_ref()
            if ctx is not None and not ctx.is_canceled():
                ctx.cancel(DEADLINE_EXCEEDED)

        timer = threading.Timer(delay, expire)
        timer.daemon = True
        self._timer = timer
        weakref.finalize(self, timer.cancel)
        timer.start()

    def deadline(self) -> Optional[datetime]:
        return self._deadline

    def cancel(self, reason: str = CANCELED) -> None:
        super().cancel(reason)
        if self._timer is not None:
            self._timer.cancel()


class ValueContext(Context):
    """A context holding one key and value, delegating everything else."""

    def __init__(self, parent: Optional[Context], key: Any, value: Any) -> None:
        self._parent = parent
        self._key = key
        self._value = value

    def deadline(self) -> Optional[datetime]:
        return self._parent.deadline() if self._parent is not None else None

    def done(self) -> threading.Event:
        return self._parent.done() if self._parent is not None else _NEVER_DONE

    def err(self) -> Optional[ContextError]:
        return self._parent.err() if self._parent is not None else None

    def value(self, key: Any) -> Any:
        if type(key) is type(self._key) and key == self._key:
            return self._value
        if self._parent is not None:
            return self._parent.value(key)
        raise KeyError("key not found")


class BackgroundContext(Context):
    """A context that is never canceled and has no deadline or values."""

    def deadline(self) -> Optional[datetime]:
        return None

    def done(self) -> threading.Event:
        return _NEVER_DONE

    def err(self) -> Optional[ContextError]:
        return None

    def value(self, key: Any) -> Any:
        raise KeyError("key not found")


class TodoContext(BackgroundContext):
    """A background context marking a place where a real one is still missing."""


_BACKGROUND = BackgroundContext()
_TODO = TodoContext()


def background() -> Context:
    """Return the shared background context."""
    return _BACKGROUND


def todo() -> Context:
    """Return the shared placeholder context."""
    return _TODO


def _require(ctx: Optional[Context], message: str) -> Context:
    if ctx is None:
        raise ValueError(message)
    return ctx


def _attach(parent: Context, child: CancelContext) -> tuple[Context, CancelFunc]:
    if isinstance(parent, CancelContext):
        parent.add_child(child)
    return child, lambda: child.cancel()


def with_cancel(parent: Context) -> tuple[Context, CancelFunc]:
    """Return a child of ``parent`` and a function that cancels it."""
    parent = _require(parent, "parent context is nil")
    return _attach(parent, CancelContext(parent))


def with_timeout(parent: Context, timeout: DurationLike) -> tuple[Context, CancelFunc]:
    """Return a child canceled after ``timeout`` and a function that cancels it."""
    parent = _require(parent, "parent context is nil")
    return _attach(parent, TimerContext(parent, timeout))


def with_deadline(parent: Context, deadline: datetime) -> tuple[Context, CancelFunc]:
    """Return a child canceled at ``deadline`` and a function that cancels it."""
    parent = _require(parent, "parent context is nil")
    return _attach(parent, TimerContext(parent, deadline))


def with_value(parent: Context, key: Any, value: Any) -> Context:
    """Return a child of ``parent`` that carries ``value`` under ``key``."""
    parent = _require(parent, "parent context is nil")
    return ValueContext(parent, key, value)


def sleep_with_context(ctx: Optional[Context], duration: DurationLike) -> None:
    """Sleep for ``duration``; raise ContextError if ``ctx`` is canceled meanwhile."""
    seconds = _seconds(duration)
    if ctx is None:
        if seconds > 0:
            time.sleep(seconds)
        return
    end = time.monotonic() + seconds
    while (remaining := end - time.monotonic()) > 0:
        if ctx.err() is not None:
            raise ContextError("context canceled during sleep")
        ctx.done().wait(min(remaining, _SLEEP_POLL))
    if ctx.err() is not None:
        raise ContextError("context canceled during sleep")


def wait_for_context(ctx: Context, timeout: DurationLike) -> bool:
    """Wait up to ``timeout`` for ``ctx`` to end; return True if it was canceled."""
    ctx = _require(ctx, "context is nil")
    end = time.monotonic() + _seconds(timeout)
    while (remaining := end - time.monotonic()) > 0:
        if ctx.err() is not None:
            return True
        ctx.done().wait(min(remaining, _WAIT_POLL))
    return ctx.err() is not None


def will_be_canceled_soon(ctx: Context, within: DurationLike) -> bool:
    """Return True if the deadline of ``ctx`` falls within ``within`` from now."""
    ctx = _require(ctx, "context is nil")
    deadline = ctx.deadline()
    if deadline is None:
        return False
    return _remaining(deadline) <= _seconds(within)