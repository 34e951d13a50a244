import pytest

from gostd import errors
from gostd.errors import CauseError, Error, JoinError, SimpleError, WrappedError


class _CustomError(SimpleError):
    pass


def test_new_keeps_message():
    err = errors.new("boom")
    assert err.error() == "boom"
    assert str(err) == "boom"
    assert isinstance(err, SimpleError)


def test_new_can_be_raised():
    err = errors.new("boom")
    assert err.error() == "boom"
    with pytest.raises(Error) as info:
        raise err
    assert info.value is err
    assert info.value.error() == "boom"


def test_default_equality_is_identity():
    a = errors.new("same")
    b = errors.new("same")
    assert a.is_equal_to(a)
    assert not a.is_equal_to(b)
    assert errors.is_(a, a)
    assert not errors.is_(a, b)


def test_wrap_none_is_none():
    assert errors.wrap("context", None) is None


def test_wrap_message_and_unwrap():
    base = errors.new("file missing")
    wrapped = errors.wrap("reading config", base)
    assert isinstance(wrapped, WrappedError)
    assert wrapped.error() == "reading config: file missing"
    assert errors.unwrap(wrapped) is base
    assert errors.is_(wrapped, base)


def test_unwrap_simple_and_none():
    assert errors.unwrap(None) is None
    assert errors.unwrap(errors.new("x")) is None


def test_is_with_none_arguments():
    e = errors.new("x")
    assert errors.is_(None, e) is False
    assert errors.is_(e, None) is False


def test_is_walks_deep_chain():
    base = errors.new("base")
    chain = errors.wrap("c", errors.wrap("b", errors.wrap("a", base)))
    assert errors.is_(chain, base)
    assert errors.is_(chain, chain)


def test_as_finds_type_in_chain():
    custom = _CustomError("custom")
    chain = errors.wrap("outer", errors.wrap("mid", custom))
    assert errors.as_(chain, _CustomError) is custom
    assert errors.as_(chain, WrappedError) is chain


def test_as_returns_none_when_absent():
    assert errors.as_(errors.new("plain"), _CustomError) is None
    assert errors.as_(None, _CustomError) is None


def test_as_rejects_non_error_class():
    with pytest.raises(TypeError):
        errors.as_(errors.new("x"), ValueError)


def test_join_empty_and_all_none():
    assert errors.join([]) is None
    assert errors.join([None, None]) is None


def test_join_single_returns_it():
    a = errors.new("a")
    assert errors.join([None, a, None]) is a


def test_join_many():
    a = errors.new("first")
    b = errors.new("second")
    joined = errors.join([a, None, b])
    assert isinstance(joined, JoinError)
    assert joined.errors() == [a, b]
    assert joined.error() == "first; second"
    assert errors.unwrap(joined) is a
    assert errors.is_(joined, a)


def test_cause_with_string_outer():
    inner = errors.new("disk full")
    c = errors.cause("write failed", inner)
    assert isinstance(c, CauseError)
    assert c.error() == "write failed: disk full"
    assert errors.unwrap(c) is inner
    assert errors.is_(c, inner)


def test_cause_matches_outer_sentinel():
    sentinel = errors.new("sentinel")
    inner = errors.new("inner")
    c = errors.cause(sentinel, inner)
    assert errors.is_(c, sentinel)
    assert errors.is_(errors.wrap("ctx", c), sentinel)
    assert not errors.is_(c, errors.new("sentinel"))


def test_cause_errors_compare_by_outer():
    sentinel = errors.new("sentinel")
    c1 = errors.cause(sentinel, errors.new("one"))
    c2 = errors.cause(sentinel, errors.new("two"))
    c3 = errors.cause(errors.new("other"), None)
    assert c1.is_equal_to(c2)
    assert not c1.is_equal_to(c3)


def test_cause_without_cause_uses_outer_message():
    sentinel = errors.new("only outer")
    c = errors.cause(sentinel, None)
    assert c.error() == sentinel.error()
    assert errors.unwrap(c) is None


def test_cause_without_outer():
    c = CauseError(None, None)
    assert c.error() == "unknown error"
    assert not c.is_equal_to(errors.new("x"))