import pytest

from gostd import errors, jsonenc
from gostd.io import BytesReader, BytesWriter, pipe

SAMPLE = {"name": "gopher", "tags": ["a", "b"], "n": 3, "x": 1.5, "ok": True, "none": None}


def test_marshal_round_trip():
    assert jsonenc.unmarshal(jsonenc.marshal(SAMPLE)) == SAMPLE


def test_marshal_string_round_trip():
    assert jsonenc.unmarshal_string(jsonenc.marshal_string(SAMPLE)) == SAMPLE


def test_marshal_sorts_keys_compactly():
    assert jsonenc.marshal_string({"b": 1, "a": 2}) == '{"a":2,"b":1}'


def test_marshal_keeps_utf8():
    assert jsonenc.marshal("é") == '"é"'.encode("utf-8")


def test_marshal_non_finite_becomes_null():
    assert jsonenc.unmarshal(jsonenc.marshal([float("nan"), float("inf")])) == [None, None]


def test_marshal_unserializable_raises():
    with pytest.raises(jsonenc.JsonError) as info:
        jsonenc.marshal(object())
    assert info.value.error().startswith("marshal error: ")


def test_unmarshal_invalid_raises():
    with pytest.raises(jsonenc.JsonError) as info:
        jsonenc.unmarshal(b"{not json")
    assert info.value.error().startswith("unmarshal error: ")


def test_unmarshal_rejects_nan_literal():
    with pytest.raises(jsonenc.JsonError):
        jsonenc.unmarshal_string("NaN")


def test_unmarshal_rejects_bad_utf8():
    with pytest.raises(jsonenc.JsonError):
        jsonenc.unmarshal(b'"\xff"')


@pytest.mark.parametrize("text,expected", [
    ('{"a": [1, 2]}', True),
    ("[1, 2", False),
    ("", False),
    ("1 2", False),
])
def test_valid(text, expected):
    assert jsonenc.valid_string(text) is expected
    assert jsonenc.valid(text.encode()) is expected


def test_compact():
    assert jsonenc.compact(b'{ "a" : [1, 2] }') == b'{"a":[1,2]}'


def test_compact_invalid_raises():
    with pytest.raises(jsonenc.JsonError):
        jsonenc.compact(b"[")


def test_indent_prefix_and_round_trip():
    out = jsonenc.indent(b'{"a":[1,2],"b":{"c":true}}', ">", "  ")
    lines = out.decode().split("\n")
    assert len(lines) > 1
    assert all(line.startswith(">") for line in lines)
    assert lines[1].startswith(">  ")
    stripped = "\n".join(line[1:] for line in lines)
    assert jsonenc.unmarshal_string(stripped) == {"a": [1, 2], "b": {"c": True}}


def test_indent_without_prefix_round_trips():
    src = jsonenc.marshal(SAMPLE)
    out = jsonenc.indent(src, "", "    ")
    assert jsonenc.unmarshal(out) == SAMPLE
    assert jsonenc.compact(out) == src


def test_encoder_writes_line():
    writer = BytesWriter()
    enc = jsonenc.new_encoder(writer)
    enc.encode(SAMPLE)
    enc.encode([1, 2])
    lines = writer.getvalue().decode().split("\n")
    assert lines[-1] == ""
    assert jsonenc.unmarshal_string(lines[0]) == SAMPLE
    assert jsonenc.unmarshal_string(lines[1]) == [1, 2]


def test_encoder_indent_uses_prefix():
    writer = BytesWriter()
    enc = jsonenc.new_encoder(writer)
    enc.set_indent("#", "  ")
    enc.encode({"a": 1})
    text = writer.getvalue().decode()
    assert text.endswith("\n")
    body = text[:-1].split("\n")
    assert all(line.startswith("#") for line in body)
    assert jsonenc.unmarshal_string("\n".join(l[1:] for l in body)) == {"a": 1}


def test_encoder_escape_html_flag():
    enc = jsonenc.new_encoder(BytesWriter())
    enc.set_escape_html(False)
    assert enc.escape_html is False


def test_decoder_reads_in_chunks():
    data = jsonenc.marshal(SAMPLE)
    dec = jsonenc.new_decoder(BytesReader(data, chunk_size=3))
    assert dec.decode() == SAMPLE


def test_decoder_token_and_more():
    dec = jsonenc.new_decoder(BytesReader(b"[true]"))
    assert dec.more() is False
    assert dec.token() == [True]


def test_decoder_empty_input_raises():
    with pytest.raises(jsonenc.JsonError):
        jsonenc.new_decoder(BytesReader(b"")).decode()


def test_decoder_propagates_reader_error_without_data():
    reader, writer = pipe()
    failure = errors.new("broken")
    writer.close_with_error(failure)
    with pytest.raises(errors.Error) as info:
        jsonenc.new_decoder(reader).decode()
    assert info.value is failure


class _FailingAfter:
    def __init__(self, first):
        self._first = first

    def read(self, size):
        if self._first is not None:
            chunk, self._first = self._first, None
            return chunk
        raise errors.new("broken")


def test_decoder_uses_partial_data_after_error():
    with pytest.raises(jsonenc.JsonError):
        jsonenc.new_decoder(_FailingAfter(b'{"a":')).decode()


def test_decoder_flags():
    dec = jsonenc.new_decoder(BytesReader(b"1"))
    dec.use_number()
    dec.disallow_unknown_fields()
    assert dec.use_number_flag is True
    assert dec.disallow_unknown is True


def test_predicates():
    assert jsonenc.is_null(None) and not jsonenc.is_null(0)
    assert jsonenc.is_bool(True) and not jsonenc.is_bool(1)
    assert jsonenc.is_int(4) and not jsonenc.is_int(True) and not jsonenc.is_int(4.0)
    assert jsonenc.is_float(4.0) and not jsonenc.is_float(4)
    assert jsonenc.is_string("s") and not jsonenc.is_string(b"s")
    assert jsonenc.is_array([]) and not jsonenc.is_array({})
    assert jsonenc.is_object({}) and not jsonenc.is_object([])


def test_getters():
    assert jsonenc.get_bool(True, False) is True
    assert jsonenc.get_bool(1, False) is False
    assert jsonenc.get_int(9, 0) == 9
    assert jsonenc.get_int(7.0, 0) == 7
    assert jsonenc.get_int("x", 5) == 5
    assert jsonenc.get_int(True, 5) == 5
    assert jsonenc.get_float(3, 0.0) == 3.0
    assert jsonenc.get_float(None, 2.5) == 2.5
    assert jsonenc.get_string("hi", "d") == "hi"
    assert jsonenc.get_string(1, "d") == "d"
    assert jsonenc.get_array({}, [0]) == [0]
    assert jsonenc.get_object([], {"k": 1}) == {"k": 1}


def test_get_array_and_object_return_copies():
    arr = [1, 2]
    got = jsonenc.get_array(arr, [])
    got.append(3)
    assert arr == [1, 2]
    obj = {"a": 1}
    got_obj = jsonenc.get_object(obj, {})
    got_obj["b"] = 2
    assert obj == {"a": 1}