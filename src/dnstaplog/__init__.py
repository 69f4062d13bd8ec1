"""
dnstaplog - render dnstap captures as a human-readable DNS audit log

This package turns a Frame Streams file of dnstap events into one text
line per event:
- Frame Streams container reading
- dnstap protobuf envelope decoding
- DNS question decoding and line formatting
"""

__version__ = "0.1.0"
__author__ = "dnstaplog Team"

from .envelope import Envelope, MessageType, decode_envelope
from .formatter import FormatOptions, LineFormatter
from .frames import FrameReader
from .packet import DNSMessage, Question, parse_dns_message
from .reader import TapReader

__all__ = [
    "Envelope",
    "MessageType",
    "decode_envelope",
    "FormatOptions",
    "LineFormatter",
    "FrameReader",
    "DNSMessage",
    "Question",
    "parse_dns_message",
    "TapReader",
]
