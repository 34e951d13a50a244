# gostd

Small building blocks for Python programs that like Go's way of doing things.
Everything is pure Python with no third-party dependencies.

| Module           | What it holds |
|------------------|---------------|
| `gostd.errors`   | Error values that wrap, chain and join; `is_` and `as_` search a chain. |
| `gostd.io`       | In-memory readers and writers, `LimitedReader`, `OffsetWriter`, a thread-safe `pipe()`, and copy/read helpers. |
| `gostd.context`  | Cancellation trees, timeouts, deadlines and request-scoped values. |
| `gostd.jsonenc`  | `marshal` / `unmarshal`, `compact`, `indent`, a streaming `Encoder` / `Decoder`, and type helpers. |
| `gostd.osfile`   | `OpenFlag`, file mode bit constants, `FileInfo`, `PathError` and `SyscallError`. |

## Errors

All errors derive from `gostd.errors.Error`, which is an `Exception`, so they
can be raised and caught as usual. `error()` gives the message and `unwrap()`
the wrapped error, if any.

```python
from gostd import errors

base = errors.new("disk full")
err = errors.wrap("saving report", base)
print(err.error())           # saving report: disk full
assert errors.is_(err, base)
assert errors.unwrap(err) is base

both = errors.join([errors.new("a"), None, errors.new("b")])
print(both.error())          # a; b
```

- `wrap(msg, None)` returns `None`; `join` returns `None` for no errors and the
  error itself when only one is given.
- `cause(outer, cause)` pairs an outer error (or a message) with its cause. The
  result reads `"outer: cause"`, unwraps to the cause, and `is_` matches it
  against the outer error.
- `as_(err, SomeErrorClass)` returns the first error in the chain of that class,
  or `None`.

## Streams and pipes

Readers have `read(size) -> bytes` and return `b""` at end of input; writers
have `write(data) -> int`. `BytesReader` and `BytesWriter` work in memory
(`BytesWriter.write_at` and `getvalue` as well).

```python
import threading
from gostd import io

reader, writer = io.pipe()

def produce():
    io.write_string(writer, "hello through the pipe")
    writer.close()

threading.Thread(target=produce).start()
print(io.read_all(reader))   # b'hello through the pipe'
```

- `copy(dst, src)` and `copy_buffer(dst, src, size)` copy until end of input and
  return the number of bytes written.
- `copy_n(dst, src, n)`, `read_full(reader, size)` and
  `read_at_least(reader, size, minimum)` raise an error matching
  `io.ERR_UNEXPECTED_EOF` when input runs out early; the raised error's `n`
  attribute tells how many bytes were moved. `read_at_least` raises
  `io.ERR_BUFFER_TOO_SMALL` when `size < minimum`.
- `LimitedReader(reader, n)` stops after `n` bytes.
- `OffsetWriter(writer_at, offset)` writes sequentially from a base offset;
  `seek` accepts `Whence.SEEK_START` and `Whence.SEEK_CURRENT` and refuses to
  move before the base.
- Closing a pipe end with `close_with_error(err)` makes reads raise `err` once
  buffered data is drained; writing to a closed pipe raises.

## Contexts

```python
from gostd import context

ctx, cancel = context.with_timeout(context.background(), 0.5)
if context.wait_for_context(ctx, 1.0):
    print("done:", ctx.err())        # done: context deadline exceeded
cancel()

req = context.with_value(context.background(), "request_id", "REQ-12345")
print(req.value("request_id"))       # REQ-12345
```

- `background()` and `todo()` return shared contexts that are never canceled.
- `with_cancel`, `with_timeout` (seconds or a `timedelta`) and `with_deadline`
  (a `datetime`) return `(ctx, cancel)`. Canceling a parent cancels its
  children.
- `ctx.done()` is a `threading.Event` set on cancellation; `ctx.err()` is
  `None` while live and a `ContextError` afterwards; `ctx.deadline()` is a
  `datetime` or `None`; `ctx.value(key)` raises `KeyError` when the key is
  absent.
- `sleep_with_context(ctx, duration)` raises `ContextError` if the context is
  canceled during the sleep; `will_be_canceled_soon(ctx, within)` checks the
  deadline.

## JSON

```python
from gostd import jsonenc

data = jsonenc.marshal({"a": [1, 2, 3]})
print(data)                                  # b'{"a":[1,2,3]}'
print(jsonenc.indent(data, "", "  ").decode())
print(jsonenc.unmarshal(data))               # {'a': [1, 2, 3]}
```

Output is compact by default, object keys are sorted, text stays UTF-8, and
non-finite floats are written as `null`. Failures raise `jsonenc.JsonError`.
`indent` uses as many spaces per level as the `indent` string has characters,
and puts `prefix` at the start of every line.

`new_encoder(writer)` writes one value per line; `new_decoder(reader)` reads
until a complete value has arrived. `is_int`, `get_string`, `get_object` and
the other helpers inspect decoded values with a default.

## File types

`gostd.osfile` defines `OpenFlag` (with `has_flag` and `combine_flags`), the
`MODE_*` bit constants, the `FileInfo` dataclass, and the `PathError` and
`SyscallError` error types.

## What this package does not do

- It does not open, read, write or stat real files, and has no directory,
  environment, process or temporary-file functions; `gostd.osfile` only
  provides the types and constants.
- It has no networking (TCP, UDP or HTTP).
- `Decoder.more()` always returns `False`, and `Encoder.set_escape_html`,
  `Decoder.use_number` and `Decoder.disallow_unknown_fields` only record a
  setting without changing how values are encoded or decoded.
- There is no command-line program.

## Running the tests

Install the package with its `test` extra and run `pytest` from the project
root.