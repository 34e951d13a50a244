"""Error values that can wrap, join and explain one another."""

from __future__ import annotations

from typing import Iterable, Optional, Type, TypeVar

E = TypeVar("E", bound="Error")


class Error(Exception):
    """Base of all errors: a message plus an optional wrapped error."""

    def error(self) -> str:
        """Return the error message."""
        return super().__str__()

    def unwrap(self) -> Optional["Error"]:
        """Return the wrapped error, or None."""
        return None

    def is_equal_to(self, other: Optional["Error"]) -> bool:
        """Return True if this error counts as the same error as ``other``."""
        return self is other

    def __str__(self) -> str:
        return self.error()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error()!r})"


class SimpleError(Error):
    """An error that carries only a fixed message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def error(self) -> str:
        return self.message


class WrappedError(Error):
    """An error that adds context to an inner error."""

    def __init__(self, message: str, inner: Optional[Error]) -> None:
        super().__init__(message, inner)
        self.message = message
        self.inner = inner

    def error(self) -> str:
        if self.inner is not None:
            return f"{self.message}: {self.inner.error()}"
        return self.message

    def unwrap(self) -> Optional[Error]:
        return self.inner


class JoinError(Error):
    """Several errors reported as one."""

    def __init__(self, errs: Iterable[Optional[Error]]) -> None:
        self._errs = list(errs)
        message = "; ".join(e.error() for e in self._errs if e is not None)
        super().__init__(message)
        self._message = message

    def error(self) -> str:
        return self._message

    def errors(self) -> list[Optional[Error]]:
        """Return the joined errors."""
        return list(self._errs)

    def unwrap(self) -> Optional[Error]:
        return self._errs[0] if self._errs else None


class CauseError(Error):
    """An outer error together with the error that caused it.

    It compares equal to its outer error, and unwraps to its cause.
    """

    def __init__(self, outer: Optional[Error], cause: Optional[Error]) -> None:
        super().__init__(outer, cause)
        self.outer = outer
        self.cause = cause

    def error(self) -> str:
        if self.outer is None:
            return "unknown error"
        text = self.outer.error()
        if self.cause is not None:
            text += ": " + self.cause.error()
        return text

    def unwrap(self) -> Optional[Error]:
        return self.cause

    def is_equal_to(self, other: Optional[Error]) -> bool:
        if self.outer is None:
            return False
        if isinstance(other, CauseError):
            return other.outer is not None and self.outer.is_equal_to(other.outer)
        return self.outer.is_equal_to(other)


def new(msg: str) -> Error:
    """Create an error with the given message."""
    return SimpleError(msg)


def wrap(msg: str, err: Optional[Error]) -> Optional[Error]:
    """Wrap ``err`` with a message; wrapping None gives None."""
    if err is None:
        return None
    return WrappedError(msg, err)


def unwrap(err: Optional[Error]) -> Optional[Error]:
    """Return the error wrapped by ``err``, or None."""
    return err.unwrap() if err is not None else None


def _chain(err: Optional[Error]):
    current = err
    while current is not None:
        yield current
        current = current.unwrap()


def is_(err: Optional[Error], target: Optional[Error]) -> bool:
    """Return True if ``target`` appears in the unwrap chain of ``err``."""
    if err is None or target is None:
        return False
    return any(current.is_equal_to(target) for current in _chain(err))


def as_(err: Optional[Error], cls: Type[E]) -> Optional[E]:
    """Return the first error in the chain of ``err`` that is a ``cls``."""
    if not (isinstance(cls, type) and issubclass(cls, Error)):
        raise TypeError("cls must be a subclass of Error")
    return next((c for c in _chain(err) if isinstance(c, cls)), None)


def join(errs: Iterable[Optional[Error]]) -> Optional[Error]:
    """Join the non-None errors; None if there are none, the error itself if one."""
    filtered = [e for e in errs if e is not None]
    if not filtered:
        return None
    if len(filtered) == 1:
        return filtered[0]
    return JoinError(filtered)


def cause(outer: "Error | str", cause: Optional[Error]) -> Error:
    """Pair an outer error (or message) with the error that caused it."""
    outer_err = new(outer) if isinstance(outer, str) else outer
    return CauseError(outer_err, cause)