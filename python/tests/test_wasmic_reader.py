import pytest

from python.wasmic.errors import MalformedInput
from python.wasmic.reader import ByteReader


def test_uleb_multibyte():
    reader = ByteReader(bytes.fromhex("E5 8E 26"))
    assert reader.uleb() == 624485
    assert reader.eof()


def test_sleb_negative():
    assert ByteReader(b"\x7f").sleb() == -1
    assert ByteReader(bytes.fromhex("C0 BB 78")).sleb() == -123456
    assert ByteReader(b"\x40").sleb(33) == -64


def test_positions_are_absolute():
    reader = ByteReader(b"\x01\x02\x03", base=0x10)
    reader.skip(2)
    assert reader.pos == 0x12
    assert reader.remaining() == 1


def test_truncated_uleb():
    with pytest.raises(MalformedInput, match="unexpected end of input") as excinfo:
        ByteReader(b"\x80\x80", base=4).uleb()
    assert excinfo.value.offset == 6


def test_overlong_uleb():
    with pytest.raises(MalformedInput, match="longer than 5 bytes"):
        ByteReader(b"\x80\x80\x80\x80\x80\x00").uleb(32)


def test_uleb_out_of_range():
    with pytest.raises(MalformedInput, match="out of range"):
        ByteReader(b"\xff\xff\xff\xff\x7f").uleb(32)


def test_read_past_end():
    with pytest.raises(MalformedInput, match="truncated read of 4 bytes"):
        ByteReader(b"\x00\x00").read(4)
