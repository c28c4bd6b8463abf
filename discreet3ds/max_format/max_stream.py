"""Bounded little-endian byte cursor for 3DS chunk data.

The whole file is held in memory as one memoryview. A ByteCursor reads
sequentially between its current offset and an exclusive ``end`` limit;
child chunks get their own cursor whose ``end`` is the child's declared
boundary, so a handler can never consume a sibling's bytes.

Two failure modes are distinguished:
    - TruncatedStreamError: the underlying data physically ends first.
    - ChunkOverrunError: the data is present but lies past this cursor's
      limit (the chunk is smaller than its contents claim).
"""

import struct

import numpy as np

from .max_errors import TruncatedStreamError, ChunkOverrunError


class ByteCursor:
    """Sequential reader over a slice of an in-memory buffer."""

    __slots__ = ('view', 'start', 'pos', 'end', 'chunk_type')

    def __init__(self, data, start=0, end=None, chunk_type=None):
        self.view = data if isinstance(data, memoryview) else memoryview(data)
        self.start = start
        self.pos = start
        self.end = len(self.view) if end is None else end
        self.chunk_type = chunk_type   # owning chunk, for error messages

    def __repr__(self):
        return (f"ByteCursor(pos={self.pos}, end={self.end}, "
                f"remaining={self.remaining})")

    @property
    def remaining(self):
        """Bytes left before this cursor's limit."""
        return max(self.end - self.pos, 0)

    @property
    def consumed(self):
        """Bytes read since this cursor was created."""
        return self.pos - self.start

    @property
    def at_end(self):
        return self.pos >= self.end

    def _require(self, size):
        """Check that ``size`` bytes can be read; return the start offset."""
        pos = self.pos
        if pos + size > self.end:
            if pos + size > len(self.view):
                raise TruncatedStreamError(
                    f"Unexpected end of data: needed {size} bytes at offset "
                    f"{pos}, only {max(len(self.view) - pos, 0)} available"
                )
            where = (f" in chunk 0x{self.chunk_type:04X}"
                     if self.chunk_type is not None else "")
            raise ChunkOverrunError(
                f"Read of {size} bytes at offset {pos} runs past chunk "
                f"boundary {self.end}{where}",
                self.chunk_type,
            )
        self.pos = pos + size
        return pos

    def _unpack(self, fmt, size):
        pos = self._require(size)
        return struct.unpack_from(fmt, self.view, pos)

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def read_u8(self):
        return self._unpack("<B", 1)[0]

    def read_u16(self):
        return self._unpack("<H", 2)[0]

    def read_u32(self):
        return self._unpack("<I", 4)[0]

    def read_f32(self):
        return self._unpack("<f", 4)[0]

    def peek_u16(self):
        """Return the next u16 without advancing, or None if unavailable."""
        if self.pos + 2 > min(self.end, len(self.view)):
            return None
        return struct.unpack_from("<H", self.view, self.pos)[0]

    def read_floats(self, count):
        """Read ``count`` floats as a tuple."""
        return self._unpack(f"<{count}f", 4 * count)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _read_array(self, count, dtype, itemsize):
        pos = self._require(count * itemsize)
        # Copy so the result stays valid and writable after the file buffer goes away.
        return np.frombuffer(self.view, dtype=dtype, count=count, offset=pos).copy()

    def read_u16_array(self, count):
        return self._read_array(count, '<u2', 2)

    def read_u32_array(self, count):
        return self._read_array(count, '<u4', 4)

    def read_f32_array(self, count):
        return self._read_array(count, '<f4', 4)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def read_string(self):
        """Read a NUL-terminated string.

        Stops at the first NUL (consumed, not returned) or at the cursor
        limit, whichever comes first. Names are nominally ASCII; bytes that
        are not valid UTF-8 are decoded as Latin-1.
        """
        limit = min(self.end, len(self.view))
        pos = self.pos
        raw = bytes(self.view[pos:limit])
        nul = raw.find(b"\x00")
        if nul < 0:
            if self.end > len(self.view):
                raise TruncatedStreamError(
                    f"Unexpected end of data while reading string at offset {pos}"
                )
            text = raw
            self.pos = limit
        else:
            text = raw[:nul]
            self.pos = pos + nul + 1
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError:
            return text.decode("latin-1")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def skip(self, count):
        """Advance ``count`` bytes without decoding them."""
        self._require(count)

    def skip_rest(self):
        """Advance to this cursor's limit; return the number of bytes skipped."""
        left = self.remaining
        if left:
            self.skip(left)
        return left

    def sub_cursor(self, size, chunk_type=None):
        """Return a cursor over the next ``size`` bytes and advance past them.

        The child is bounded by ``size``; the parent's position moves to the
        child's end immediately, so whatever the child leaves unread is
        skipped.
        """
        start = self._require(size)
        return ByteCursor(self.view, start, start + size, chunk_type)
