"""Generic chunk tree walker for the 3DS format.

Chunk layout (little-endian):
    u16  type
    u32  total size, including this 6-byte header
    ...  payload: chunk-local fields, then nested child chunks

A container handler reads its own local fields from the front of its
payload and then hands the rest to ChunkWalker.walk(), which loops over
the children: read a header, carve a bounded cursor for the child's
payload, dispatch to the handler registered for that type (or skip it),
and add the child's declared size to a running total.

Byte accounting:
    The container always advances exactly its own declared size. When the
    children's sizes do not add up to that, the walker either logs a
    warning and resynchronises (lenient, the default) or raises
    ChunkSizeError (strict). Unknown chunk types are skipped by length in
    both modes.
"""

import logging

from .max_constants import CHUNK_HEADER_SIZE, chunk_name
from .max_errors import ChunkSizeError

_log = logging.getLogger(__name__)


class ChunkHeader:
    """Header of a single chunk."""

    __slots__ = ('type', 'size', 'offset')

    def __init__(self, chunk_type=0, size=0, offset=0):
        self.type = chunk_type
        self.size = size        # total size, header included
        self.offset = offset    # absolute file offset of the header

    @property
    def payload_size(self):
        return self.size - CHUNK_HEADER_SIZE

    @classmethod
    def read(cls, cursor):
        """Read a header from the cursor's current position."""
        offset = cursor.pos
        chunk_type = cursor.read_u16()
        size = cursor.read_u32()
        return cls(chunk_type, size, offset)

    def __repr__(self):
        return (f"ChunkHeader({chunk_name(self.type)}, size={self.size}, "
                f"offset={self.offset})")


class ChunkWalker:
    """Walks the children of container chunks and dispatches to handlers.

    Handlers are callables ``handler(cursor, header, target)`` where
    ``cursor`` is bounded to the child's payload and ``target`` is the
    record the container is filling in. Whatever a handler leaves unread
    is skipped.

    When ``trace`` is enabled every visited chunk is appended to
    ``self.visited`` as ``(depth, header)`` for debugging dumps.
    """

    def __init__(self, strict=False, trace=False):
        self.strict = strict
        self.trace = trace
        self.visited = []
        self.depth = 0
        self.unknown_count = 0
        self.mismatch_count = 0

    def _mismatch(self, message, chunk_type):
        self.mismatch_count += 1
        if self.strict:
            raise ChunkSizeError(message, chunk_type)
        _log.warning(message)

    def next_child(self, cursor):
        """Read the next child header from ``cursor``.

        Returns ``(header, child_cursor)`` or None when the container has no
        further chunks. Size problems are resolved here according to the
        strict/lenient policy, so the container cursor always ends up
        advanced by at most its own remaining size.
        """
        left = cursor.remaining
        if left == 0:
            return None
        if left < CHUNK_HEADER_SIZE:
            self._mismatch(
                f"{left} trailing byte(s) in chunk "
                f"{chunk_name(cursor.chunk_type or 0)} too small for a "
                f"chunk header, skipping",
                cursor.chunk_type,
            )
            cursor.skip_rest()
            return None

        header = ChunkHeader.read(cursor)
        if header.size < CHUNK_HEADER_SIZE:
            self._mismatch(
                f"Chunk {chunk_name(header.type)} at offset {header.offset} "
                f"declares impossible size {header.size}, skipping rest of "
                f"container",
                header.type,
            )
            cursor.skip_rest()
            return None

        payload = header.payload_size
        if payload > cursor.remaining:
            self._mismatch(
                f"Chunk {chunk_name(header.type)} at offset {header.offset} "
                f"declares {header.size} bytes but its container only has "
                f"{cursor.remaining + CHUNK_HEADER_SIZE} left, clamping",
                header.type,
            )
            payload = cursor.remaining

        if self.trace:
            self.visited.append((self.depth, header))
        return header, cursor.sub_cursor(payload, header.type)

    def walk(self, cursor, handlers, target):
        """Walk every child chunk left in ``cursor``.

        Returns the number of bytes walked, which is always the number
        that was left in the cursor when walk() was called.
        """
        start = cursor.pos
        while True:
            item = self.next_child(cursor)
            if item is None:
                break
            header, child = item

            handler = handlers.get(header.type)
            if handler is None:
                self.unknown_count += 1
                _log.debug("Skipping chunk %s (%d bytes) at offset %d",
                           chunk_name(header.type), header.size, header.offset)
                continue

            self.depth += 1
            try:
                handler(child, header, target)
            finally:
                self.depth -= 1
            if child.remaining:
                _log.debug("Chunk %s left %d byte(s) unread",
                           chunk_name(header.type), child.remaining)

        return cursor.pos - start
