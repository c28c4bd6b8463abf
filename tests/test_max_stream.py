import numpy as np
import pytest

from discreet3ds.max_format.max_errors import ChunkOverrunError, TruncatedStreamError
from discreet3ds.max_format.max_stream import ByteCursor

from conftest import u8, u16, u32, f32, cstr


def test_reads_little_endian_scalars():
    cur = ByteCursor(u8(0xAB) + u16(0x1234) + u32(0xDEADBEEF) + f32(1.5))
    assert cur.read_u8() == 0xAB
    assert cur.read_u16() == 0x1234
    assert cur.read_u32() == 0xDEADBEEF
    assert cur.read_f32() == 1.5
    assert cur.at_end
    assert cur.consumed == 11


def test_u16_is_unsigned():
    assert ByteCursor(b"\xff\xff").read_u16() == 0xFFFF


def test_string_stops_at_nul():
    cur = ByteCursor(cstr("Cube") + u16(7))
    assert cur.read_string() == "Cube"
    assert cur.read_u16() == 7


def test_string_without_nul_runs_to_cursor_limit():
    cur = ByteCursor(b"abc")
    assert cur.read_string() == "abc"
    assert cur.at_end


def test_string_falls_back_to_latin1():
    cur = ByteCursor(b"caf\xe9\x00")
    assert cur.read_string() == "café"


def test_empty_string():
    cur = ByteCursor(b"\x00rest")
    assert cur.read_string() == ""
    assert cur.pos == 1


def test_truncated_read_raises():
    cur = ByteCursor(b"\x01\x02")
    with pytest.raises(TruncatedStreamError):
        cur.read_u32()


def test_truncated_error_is_also_eof_error():
    with pytest.raises(EOFError):
        ByteCursor(b"").read_u8()


def test_read_past_sub_cursor_limit_is_overrun():
    parent = ByteCursor(u16(1, 2, 3, 4))
    child = parent.sub_cursor(4, chunk_type=0x4110)
    assert child.read_u16() == 1
    assert child.read_u16() == 2
    with pytest.raises(ChunkOverrunError) as info:
        child.read_u16()
    assert info.value.chunk_type == 0x4110
    # the parent has already moved past the child
    assert parent.read_u16() == 3


def test_sub_cursor_larger_than_data_is_truncation():
    cur = ByteCursor(b"\x00" * 4)
    with pytest.raises(TruncatedStreamError):
        cur.sub_cursor(10)


def test_arrays_are_copied_and_writable():
    data = bytearray(f32(1.0, 2.0, 3.0))
    cur = ByteCursor(data)
    values = cur.read_f32_array(3)
    data[0:4] = f32(9.0)
    np.testing.assert_array_equal(values, [1.0, 2.0, 3.0])
    values[0] = 5.0


def test_integer_arrays():
    cur = ByteCursor(u16(1, 65535) + u32(7, 2 ** 31))
    np.testing.assert_array_equal(cur.read_u16_array(2), [1, 65535])
    np.testing.assert_array_equal(cur.read_u32_array(2), [7, 2 ** 31])


def test_skip_and_skip_rest():
    cur = ByteCursor(bytes(10))
    cur.skip(3)
    assert cur.remaining == 7
    assert cur.skip_rest() == 7
    assert cur.skip_rest() == 0


def test_peek_does_not_advance():
    cur = ByteCursor(u16(0x4D4D))
    assert cur.peek_u16() == 0x4D4D
    assert cur.pos == 0
    cur.skip(1)
    assert cur.peek_u16() is None
