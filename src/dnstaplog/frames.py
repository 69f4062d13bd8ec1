"""
Frame Streams reader for captured dnstap files

A capture is a sequence of frames, each prefixed by a 4-byte big-endian
length. A zero length escapes a control frame (START, STOP, ...). Only the
uni-directional file flavour is handled here: START, data frames, STOP.
"""

import struct
from typing import BinaryIO, Iterator, List, Optional, Tuple

from .constants import (
    DEFAULT_MAX_FRAME_SIZE,
    FSTRM_CONTROL_ACCEPT,
    FSTRM_CONTROL_FIELD_CONTENT_TYPE,
    FSTRM_CONTROL_FINISH,
    FSTRM_CONTROL_FRAME_LENGTH_MAX,
    FSTRM_CONTROL_READY,
    FSTRM_CONTROL_START,
    FSTRM_CONTROL_STOP,
)
from .exceptions import FrameCorruption, IOFailure
from .utils.logger import get_logger

CONTROL_NAMES = {
    FSTRM_CONTROL_ACCEPT: "ACCEPT",
    FSTRM_CONTROL_START: "START",
    FSTRM_CONTROL_STOP: "STOP",
    FSTRM_CONTROL_READY: "READY",
    FSTRM_CONTROL_FINISH: "FINISH",
}

_u32 = struct.Struct("!I")


class FrameReader:
    """Iterate over the data frames of a Frame Streams file"""

    def __init__(self, stream: BinaryIO, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
                 content_type: Optional[str] = None):
        self.stream = stream
        self.max_frame_size = max_frame_size
        self.content_type = content_type
        self.logger = get_logger(__name__)

        self.started = False
        self.stopped = False
        self.content_types: List[bytes] = []
        self.frame_count = 0
        self.bytes_read = 0

    def __iter__(self) -> Iterator[bytes]:
        return self.frames()

    def frames(self) -> Iterator[bytes]:
        """Yield data frame payloads in stream order.

        Ends at STOP or at a clean end of file on a frame boundary. Raises
        FrameCorruption on anything else.
        """
        while not self.stopped:
            header = self._read(4, allow_eof=True)
            if header is None:
                if self.started:
                    self.logger.debug("Stream ended without a STOP frame")
                return

            (length,) = _u32.unpack(header)
            if length == 0:
                self._handle_control()
                continue

            if not self.started:
                raise FrameCorruption("data frame before START control frame")
            if length > self.max_frame_size:
                raise FrameCorruption(
                    f"data frame of {length} bytes exceeds maximum of {self.max_frame_size}"
                )
            payload = self._read(length)
            self.frame_count += 1
            yield payload

    def _handle_control(self) -> None:
        (length,) = _u32.unpack(self._read(4))
        if length > FSTRM_CONTROL_FRAME_LENGTH_MAX:
            raise FrameCorruption(f"control frame of {length} bytes is too long")
        if length < 4:
            raise FrameCorruption(f"control frame of {length} bytes is too short")

        control_type, fields = parse_control_frame(self._read(length))
        name = CONTROL_NAMES.get(control_type, str(control_type))

        if control_type == FSTRM_CONTROL_START:
            if self.started:
                raise FrameCorruption("duplicate START control frame")
            self.content_types = [value for ftype, value in fields
                                  if ftype == FSTRM_CONTROL_FIELD_CONTENT_TYPE]
            self._check_content_type()
            self.started = True
            self.logger.debug(f"START frame, content types: {self.content_types}")
        elif control_type == FSTRM_CONTROL_STOP:
            if not self.started:
                raise FrameCorruption("STOP control frame before START")
            self.stopped = True
            self.logger.debug(f"STOP frame after {self.frame_count} data frames")
        else:
            raise FrameCorruption(f"unexpected {name} control frame in file stream")

    def _check_content_type(self) -> None:
        if self.content_type is None:
            return
        expected = self.content_type.encode("utf-8")
        if expected not in self.content_types:
            raise FrameCorruption(
                f"content type mismatch: expected {self.content_type}, "
                f"got {[c.decode('utf-8', errors='replace') for c in self.content_types]}"
            )

    def _read(self, size: int, allow_eof: bool = False) -> Optional[bytes]:
        """Read exactly size bytes. None on clean EOF when allowed."""
        chunks = []
        remaining = size
        while remaining:
            try:
                chunk = self.stream.read(remaining)
            except OSError as e:
                raise IOFailure(f"unable to read input: {e}") from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        data = b"".join(chunks)
        if not data and allow_eof:
            return None
        if len(data) != size:
            raise FrameCorruption(f"truncated frame: wanted {size} bytes, got {len(data)}")
        self.bytes_read += size
        return data


def parse_control_frame(frame: bytes) -> Tuple[int, List[Tuple[int, bytes]]]:
    """Split a control frame body into its type and (field type, value) pairs"""
    (control_type,) = _u32.unpack_from(frame, 0)
    fields = []
    offset = 4
    while offset < len(frame):
        if offset + 8 > len(frame):
            raise FrameCorruption("truncated control frame field header")
        field_type, field_len = struct.unpack_from("!II", frame, offset)
        offset += 8
        if offset + field_len > len(frame):
            raise FrameCorruption("truncated control frame field")
        fields.append((field_type, frame[offset:offset + field_len]))
        offset += field_len
    return control_type, fields
