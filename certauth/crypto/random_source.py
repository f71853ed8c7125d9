"""OS CSPRNG behind a pull interface, one instance per operation."""

import os
import uuid


class RandomSource:
    """
    Pull-based random byte source backed by os.urandom.

    Use as a context manager; the instance is closed on exit and any
    further use raises ValueError. Not thread-safe: create one per call.
    """

    def __init__(self):
        self.closed = False

    def __enter__(self):
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _check_open(self):
        if self.closed:
            raise ValueError("RandomSource used after close")

    def next_bytes(self, buffer: bytearray) -> bytearray:
        """
        Fill buffer in place with random bytes.

        Args:
            buffer: writable buffer (bytearray or memoryview)

        Returns:
            the same buffer
        """
        self._check_open()
        buffer[:] = os.urandom(len(buffer))
        return buffer

    def token_uuid(self) -> str:
        """Random UUID4 string drawn from this source."""
        raw = self.next_bytes(bytearray(16))
        return str(uuid.UUID(bytes=bytes(raw), version=4))

    def close(self):
        self.closed = True
