from __future__ import annotations

from fidoexp.core.errors import BufferOverflowError


class ResponseBuffer:
    """Fixed-capacity byte buffer that accumulates response data.

    Writes that would go past the capacity are rejected before anything
    is copied, so the running length never exceeds the capacity.
    """

    def __init__(self, capacity: int = 2048) -> None:
        if capacity < 0:
            raise ValueError(f"negative capacity: {capacity}")
        self._capacity = capacity
        self._buf = bytearray()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def length(self) -> int:
        return len(self._buf)

    @property
    def remaining(self) -> int:
        return self._capacity - len(self._buf)

    @property
    def data(self) -> bytes:
        return bytes(self._buf)

    def write(self, data: bytes) -> None:
        """Append data, raising BufferOverflowError if it does not fit."""
        if len(data) > self.remaining:
            raise BufferOverflowError(
                f"response of {len(self._buf) + len(data)} bytes exceeds "
                f"buffer capacity {self._capacity}"
            )
        self._buf.extend(data)

    def reset(self) -> None:
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"ResponseBuffer({self.length}/{self._capacity})"
