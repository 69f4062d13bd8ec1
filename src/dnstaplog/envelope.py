"""
dnstap Envelope model and decoder
"""

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .exceptions import SchemaViolation
from .schema import Dnstap, DecodeError, SOCKET_PROTOCOLS

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address, bytes]

QUERY_SUFFIX = "_QUERY"


class Phase(Enum):
    QUERY = "QUERY"
    RESPONSE = "RESPONSE"

    def __str__(self):
        return self.value.lower()


class MessageType(Enum):
    """dnstap Message.Type, valued by wire number"""
    AUTH_QUERY = 1
    AUTH_RESPONSE = 2
    RESOLVER_QUERY = 3
    RESOLVER_RESPONSE = 4
    CLIENT_QUERY = 5
    CLIENT_RESPONSE = 6
    FORWARDER_QUERY = 7
    FORWARDER_RESPONSE = 8
    STUB_QUERY = 9
    STUB_RESPONSE = 10
    TOOL_QUERY = 11
    TOOL_RESPONSE = 12

    @property
    def phase(self) -> Phase:
        """QUERY iff the type name carries the query marker"""
        return Phase.QUERY if self.name.endswith(QUERY_SUFFIX) else Phase.RESPONSE

    @property
    def code(self) -> str:
        """Two letter abbreviation, like AQ or CR"""
        return MESSAGE_TYPE_CODES[self]


MESSAGE_TYPE_CODES = {
    MessageType.AUTH_QUERY: "AQ",
    MessageType.AUTH_RESPONSE: "AR",
    MessageType.CLIENT_QUERY: "CQ",
    MessageType.CLIENT_RESPONSE: "CR",
    MessageType.FORWARDER_QUERY: "FQ",
    MessageType.FORWARDER_RESPONSE: "FR",
    MessageType.RESOLVER_QUERY: "RQ",
    MessageType.RESOLVER_RESPONSE: "RR",
    MessageType.STUB_QUERY: "SQ",
    MessageType.STUB_RESPONSE: "SR",
    MessageType.TOOL_QUERY: "TQ",
    MessageType.TOOL_RESPONSE: "TR",
}

SocketProtocol = Enum("SocketProtocol", SOCKET_PROTOCOLS)


@dataclass(slots=True)
class Envelope:
    """One decoded dnstap event. Absent fields are None."""

    type: MessageType
    socket_protocol: Optional[SocketProtocol] = None

    query_address: Optional[Address] = None
    response_address: Optional[Address] = None
    query_port: Optional[int] = None
    response_port: Optional[int] = None

    query_time_sec: Optional[int] = None
    query_time_nsec: Optional[int] = None
    response_time_sec: Optional[int] = None
    response_time_nsec: Optional[int] = None

    query_message: Optional[bytes] = None
    response_message: Optional[bytes] = None

    @property
    def phase(self) -> Phase:
        return self.type.phase

    @property
    def is_query(self) -> bool:
        return self.type.phase is Phase.QUERY

    def active_message(self) -> Optional[bytes]:
        """Payload on the side selected by the phase"""
        return self.query_message if self.is_query else self.response_message

    def active_time(self) -> Optional[Tuple[int, int]]:
        """(sec, nsec) on the side selected by the phase, None if not recorded"""
        if self.is_query:
            sec, nsec = self.query_time_sec, self.query_time_nsec
        else:
            sec, nsec = self.response_time_sec, self.response_time_nsec
        if sec is None:
            return None
        return sec, nsec or 0


def _optional(message, field_name):
    return getattr(message, field_name) if message.HasField(field_name) else None


def _address(message, field_name) -> Optional[Address]:
    raw = _optional(message, field_name)
    if not raw:
        return None
    if len(raw) in (4, 16):
        return ipaddress.ip_address(raw)
    return raw


def decode_envelope(data: bytes) -> Envelope:
    """Deserialize one dnstap frame payload.

    Raises SchemaViolation when the record cannot be decoded or its message
    type is missing or not one of the twelve known variants.
    """
    record = Dnstap()
    try:
        record.ParseFromString(data)
    except DecodeError as e:
        raise SchemaViolation(f"unable to decode dnstap record: {e}") from e

    if not record.HasField("message"):
        raise SchemaViolation("dnstap record carries no message")
    msg = record.message

    if not msg.HasField("type"):
        raise SchemaViolation("dnstap message type is missing or unrecognized")
    try:
        msg_type = MessageType(msg.type)
    except ValueError as e:
        raise SchemaViolation(f"unexpected message type: {msg.type}") from e

    protocol = _optional(msg, "socket_protocol")

    return Envelope(
        type=msg_type,
        socket_protocol=SocketProtocol(protocol) if protocol is not None else None,
        query_address=_address(msg, "query_address"),
        response_address=_address(msg, "response_address"),
        query_port=_optional(msg, "query_port"),
        response_port=_optional(msg, "response_port"),
        query_time_sec=_optional(msg, "query_time_sec"),
        query_time_nsec=_optional(msg, "query_time_nsec"),
        response_time_sec=_optional(msg, "response_time_sec"),
        response_time_nsec=_optional(msg, "response_time_nsec"),
        query_message=_optional(msg, "query_message"),
        response_message=_optional(msg, "response_message"),
    )
