"""
dnstap reader pipeline: frames -> envelopes -> DNS messages -> log lines
"""

import time
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union

from .config import ReaderConfig
from .envelope import decode_envelope
from .exceptions import IOFailure
from .formatter import FormatOptions, LineFormatter
from .frames import FrameReader
from .packet import DNSAnalyzer
from .utils.logger import get_logger


class TapReader:
    """Sequential dnstap-to-text pipeline.

    Frames are processed one at a time in stream order. Schema, framing and
    I/O errors propagate to the caller; DNS decode failures are logged and
    rendered as placeholder records.
    """

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()
        self.formatter = LineFormatter(self.options)
        self.analyzer = DNSAnalyzer()
        self.logger = get_logger(__name__)

        self.frame_count = 0
        self.line_count = 0
        self.byte_count = 0
        self.start_time = None
        self.duration = 0.0

    def process_frame(self, frame: bytes) -> str:
        """Turn one raw dnstap frame into one formatted line"""
        envelope = decode_envelope(frame)
        query_address, response_address = self.formatter.addresses(envelope)
        context = (
            f"{envelope.phase} message "
            f"({query_address} {self.formatter.arrow(envelope)} {response_address})"
        )
        message = self.analyzer.analyze(envelope.active_message(), context)
        return self.formatter.format(envelope, message)

    def iter_lines(self, frames: Iterable[bytes]) -> Iterator[str]:
        """Lazily format frames in order"""
        for frame in frames:
            self.frame_count += 1
            self.byte_count += len(frame)
            yield self.process_frame(frame)

    def run(self, frames: Iterable[bytes], sink: TextIO) -> int:
        """Write one line per frame to sink and flush it. Returns the line count."""
        self.start_time = time.time()
        try:
            for line in self.iter_lines(frames):
                sink.write(line)
                self.line_count += 1
            sink.flush()
        except OSError as e:
            raise IOFailure(f"unable to write output: {e}") from e
        finally:
            self.duration = time.time() - self.start_time
        return self.line_count

    def read_file(self, path: Union[str, Path], sink: TextIO,
                  config: Optional[ReaderConfig] = None) -> int:
        """Open a Frame Streams capture and run the pipeline over it"""
        config = config or ReaderConfig()
        try:
            stream = open(path, 'rb')
        except OSError as e:
            raise IOFailure(f"unable to open {path}: {e}") from e

        with stream:
            frames = FrameReader(
                stream,
                max_frame_size=config.max_frame_size,
                content_type=config.content_type,
            )
            self.logger.debug(f"Reading dnstap frames from {path}")
            return self.run(frames, sink)

    def get_stats(self) -> dict:
        """Pipeline statistics merged with the DNS analyzer's"""
        stats = {
            'frames': self.frame_count,
            'lines': self.line_count,
            'bytes': self.byte_count,
            'duration': self.duration,
        }
        stats.update(self.analyzer.get_stats())
        return stats
