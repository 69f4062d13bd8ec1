"""Builders for dnstap test fixtures: DNS wire messages, envelopes, Frame Streams"""

import struct

from dnstaplog.constants import (
    DNSTAP_CONTENT_TYPE,
    FSTRM_CONTROL_FIELD_CONTENT_TYPE,
    FSTRM_CONTROL_START,
    FSTRM_CONTROL_STOP,
)
from dnstaplog.schema import Dnstap, DNSTAP_TYPE_MESSAGE

# 27-Oct-2021 18:29:47 UTC
TIME_SEC = 1635359387


def encode_name(name):
    """Wire form of a dotted name; bytes are taken as already encoded"""
    if isinstance(name, bytes):
        return name
    if name == ".":
        return b"\x00"
    labels = name.rstrip(".").split(".")
    return b"".join(bytes([len(label)]) + label.encode("ascii") for label in labels) + b"\x00"


def build_dns_message(qid=0x1234, name="example.com.", qtype=1, qclass=1, flags=0x0100):
    """Wire-format message with one question, or none when name is None"""
    qdcount = 0 if name is None else 1
    header = struct.pack("!HHHHHH", qid, flags, qdcount, 0, 0, 0)
    if name is None:
        return header
    return header + encode_name(name) + struct.pack("!HH", qtype, qclass)


def build_envelope(msg_type=None, identity=b"ns1.example", **fields):
    """Serialized Dnstap record; fields left as None stay unset"""
    record = Dnstap()
    record.type = DNSTAP_TYPE_MESSAGE
    if identity is not None:
        record.identity = identity
    message = record.message
    if msg_type is not None:
        message.type = msg_type
    for key, value in fields.items():
        if value is not None:
            setattr(message, key, value)
    record.message.SetInParent()
    return record.SerializeToString()


def control_frame(control_type, content_type=None):
    body = struct.pack("!I", control_type)
    if content_type is not None:
        body += struct.pack("!II", FSTRM_CONTROL_FIELD_CONTENT_TYPE, len(content_type)) + content_type
    return struct.pack("!II", 0, len(body)) + body


def data_frame(payload):
    return struct.pack("!I", len(payload)) + payload


def frame_stream(payloads, content_type=DNSTAP_CONTENT_TYPE.encode(), stop=True):
    stream = control_frame(FSTRM_CONTROL_START, content_type)
    for payload in payloads:
        stream += data_frame(payload)
    if stop:
        stream += control_frame(FSTRM_CONTROL_STOP)
    return stream
