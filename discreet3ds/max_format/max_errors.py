"""Exceptions raised while decoding a 3DS file.

All of them derive from ValueError so callers that already guard file
loading with ``except ValueError`` keep working.
"""


class MaxFormatError(ValueError):
    """Base class for malformed or unsupported 3DS data."""


class NotA3DSFileError(MaxFormatError):
    """The leading chunk is not the 0x4D4D main chunk."""


class TruncatedStreamError(MaxFormatError, EOFError):
    """The data ended before a read could be satisfied."""


class ChunkOverrunError(MaxFormatError):
    """A handler tried to read past the end of its own chunk."""

    def __init__(self, message, chunk_type=None):
        super().__init__(message)
        self.chunk_type = chunk_type


class ChunkSizeError(MaxFormatError):
    """Declared chunk sizes do not add up (strict mode only)."""

    def __init__(self, message, chunk_type=None):
        super().__init__(message)
        self.chunk_type = chunk_type


class InvalidMeshError(MaxFormatError):
    """A face references a vertex index outside the vertex list."""
