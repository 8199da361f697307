import io
import struct
from typing import BinaryIO, Iterator

from vtfheader.core.exceptions import TruncatedInputError


class ByteCursor:
    """Little-endian sequential reader over a seekable binary stream"""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

        start = stream.tell()
        stream.seek(0, io.SEEK_END)
        self.length = stream.tell()
        stream.seek(start)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteCursor":
        return cls(io.BytesIO(data))

    def position(self) -> int:
        return self.stream.tell()

    def remaining(self) -> int:
        return max(0, self.length - self.stream.tell())

    def read_bytes(self, n: int) -> bytes:
        """
        Read exactly n bytes

        Raises:
            TruncatedInputError: if fewer than n bytes remain
        """
        if n < 0:
            raise ValueError(f"Cannot read a negative byte count: {n}")

        offset = self.position()
        data = self.stream.read(n)
        if len(data) < n:
            raise TruncatedInputError(n, len(data), offset)
        return data

    def skip(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"Cannot skip backwards: {n}")

        available = self.remaining()
        if n > available:
            raise TruncatedInputError(n, available, self.position())
        self.stream.seek(n, io.SEEK_CUR)

    def _unpack(self, fmt: str):
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self.read_bytes(size))[0]

    def read_u8(self) -> int:
        return self._unpack("<B")

    def read_i16(self) -> int:
        return self._unpack("<h")

    def read_i32(self) -> int:
        return self._unpack("<i")

    def read_u32(self) -> int:
        return self._unpack("<I")

    def read_f32(self) -> float:
        return self._unpack("<f")

    def read_text(self, n: int, encoding: str = "utf-8") -> str:
        """Read n bytes and decode them, replacing undecodable bytes"""
        return self.read_bytes(n).decode(encoding, errors="replace")

    def iter_chunks(self, chunk_size: int) -> Iterator[bytes]:
        """Yield the rest of the stream in chunks of at most chunk_size bytes"""
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive: {chunk_size}")

        while self.remaining() > 0:
            chunk = self.stream.read(chunk_size)
            if not chunk:
                break
            yield chunk
