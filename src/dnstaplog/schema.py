"""
dnstap protobuf schema

The ``dnstap.Dnstap`` and ``dnstap.Message`` classes are built at import
time from a descriptor mirroring dnstap.proto, so no protoc-generated
module is needed. Fields are declared optional (the upstream schema marks
``type`` as required) so that a missing type is reported as a schema
violation by the envelope decoder instead of a generic decode error.
Enums are closed (proto2), which means out-of-range values are kept as
unknown fields and the field reads as unset.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

FieldProto = descriptor_pb2.FieldDescriptorProto

SOCKET_FAMILIES = [("INET", 1), ("INET6", 2)]

SOCKET_PROTOCOLS = [
    ("UDP", 1),
    ("TCP", 2),
    ("DOT", 3),
    ("DOH", 4),
    ("DNSCryptUDP", 5),
    ("DNSCryptTCP", 6),
    ("DOQ", 7),
]

MESSAGE_TYPES = [
    ("AUTH_QUERY", 1),
    ("AUTH_RESPONSE", 2),
    ("RESOLVER_QUERY", 3),
    ("RESOLVER_RESPONSE", 4),
    ("CLIENT_QUERY", 5),
    ("CLIENT_RESPONSE", 6),
    ("FORWARDER_QUERY", 7),
    ("FORWARDER_RESPONSE", 8),
    ("STUB_QUERY", 9),
    ("STUB_RESPONSE", 10),
    ("TOOL_QUERY", 11),
    ("TOOL_RESPONSE", 12),
]


def _add_enum(parent, name, values):
    enum = parent.enum_type.add()
    enum.name = name
    for value_name, number in values:
        value = enum.value.add()
        value.name = value_name
        value.number = number


def _add_field(message, name, number, field_type, type_name=None):
    field = message.field.add()
    field.name = name
    field.number = number
    field.label = FieldProto.LABEL_OPTIONAL
    field.type = field_type
    if type_name:
        field.type_name = type_name


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto()
    proto.name = "dnstaplog/dnstap.proto"
    proto.package = "dnstap"
    proto.syntax = "proto2"

    _add_enum(proto, "SocketFamily", SOCKET_FAMILIES)
    _add_enum(proto, "SocketProtocol", SOCKET_PROTOCOLS)

    message = proto.message_type.add()
    message.name = "Message"
    _add_enum(message, "Type", MESSAGE_TYPES)
    _add_field(message, "type", 1, FieldProto.TYPE_ENUM, ".dnstap.Message.Type")
    _add_field(message, "socket_family", 2, FieldProto.TYPE_ENUM, ".dnstap.SocketFamily")
    _add_field(message, "socket_protocol", 3, FieldProto.TYPE_ENUM, ".dnstap.SocketProtocol")
    _add_field(message, "query_address", 4, FieldProto.TYPE_BYTES)
    _add_field(message, "response_address", 5, FieldProto.TYPE_BYTES)
    _add_field(message, "query_port", 6, FieldProto.TYPE_UINT32)
    _add_field(message, "response_port", 7, FieldProto.TYPE_UINT32)
    _add_field(message, "query_time_sec", 8, FieldProto.TYPE_UINT64)
    _add_field(message, "query_time_nsec", 9, FieldProto.TYPE_FIXED32)
    _add_field(message, "query_message", 10, FieldProto.TYPE_BYTES)
    _add_field(message, "query_zone", 11, FieldProto.TYPE_BYTES)
    _add_field(message, "response_time_sec", 12, FieldProto.TYPE_UINT64)
    _add_field(message, "response_time_nsec", 13, FieldProto.TYPE_FIXED32)
    _add_field(message, "response_message", 14, FieldProto.TYPE_BYTES)

    dnstap = proto.message_type.add()
    dnstap.name = "Dnstap"
    _add_enum(dnstap, "Type", [("MESSAGE", 1)])
    _add_field(dnstap, "identity", 1, FieldProto.TYPE_BYTES)
    _add_field(dnstap, "version", 2, FieldProto.TYPE_BYTES)
    _add_field(dnstap, "extra", 3, FieldProto.TYPE_BYTES)
    _add_field(dnstap, "message", 14, FieldProto.TYPE_MESSAGE, ".dnstap.Message")
    _add_field(dnstap, "type", 15, FieldProto.TYPE_ENUM, ".dnstap.Dnstap.Type")

    return proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

Dnstap = message_factory.GetMessageClass(_pool.FindMessageTypeByName("dnstap.Dnstap"))
Message = message_factory.GetMessageClass(_pool.FindMessageTypeByName("dnstap.Message"))

DNSTAP_TYPE_MESSAGE = 1

__all__ = [
    "Dnstap",
    "Message",
    "DecodeError",
    "DNSTAP_TYPE_MESSAGE",
    "MESSAGE_TYPES",
    "SOCKET_FAMILIES",
    "SOCKET_PROTOCOLS",
]
