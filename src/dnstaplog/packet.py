"""
DNS message decoding for dnstap payloads
"""

import struct
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

import dpkt

from .constants import DNS_CLASSES, DNS_TYPES, DNS_HEADER_LEN
from .exceptions import DNSParseFailure
from .utils.logger import get_logger

# Characters with special meaning in zone file names
ESCAPED_NAME_BYTES = frozenset(b'."();\\@$')

# Record types whose rdata dpkt interprets, the rest stay opaque
RDATA_TYPES = frozenset({
    dpkt.dns.DNS_A, dpkt.dns.DNS_NS, dpkt.dns.DNS_CNAME, dpkt.dns.DNS_SOA,
    dpkt.dns.DNS_NULL, dpkt.dns.DNS_PTR, dpkt.dns.DNS_HINFO, dpkt.dns.DNS_MX,
    dpkt.dns.DNS_TXT, dpkt.dns.DNS_AAAA, dpkt.dns.DNS_SRV, dpkt.dns.DNS_OPT,
})


def get_class_name(qclass: int) -> str:
    """IN, CH etc or synthesized CLASS<n> for unknown classes"""
    return DNS_CLASSES.get(qclass, f"CLASS{qclass}")


def get_type_name(qtype: int) -> str:
    """A, MX, NS etc or synthesized TYPE<n> for unknown types"""
    return DNS_TYPES.get(qtype, f"TYPE{qtype}")


def escape_label(label: bytes) -> str:
    """Presentation form of one label: special characters get a backslash,
    bytes outside printable ASCII become \\DDD"""
    chars = []
    for byte in label:
        if byte in ESCAPED_NAME_BYTES:
            chars.append('\\' + chr(byte))
        elif 0x20 < byte < 0x7f:
            chars.append(chr(byte))
        else:
            chars.append(f'\\{byte:03d}')
    return ''.join(chars)


def unpack_name(buf: bytes, off: int):
    """Read a possibly compressed name at off.

    Follows the same rules as dpkt.dns.unpack_name, but keeps label
    boundaries and arbitrary bytes by returning the escaped presentation
    form, like "a\\.b.example.". Returns (name, offset after the name).
    """
    labels = []
    saved_off = 0
    start_off = off
    name_length = 0
    while True:
        if off >= len(buf):
            raise dpkt.NeedData("name runs past the end of the message")
        n = buf[off]
        if n == 0:
            off += 1
            break
        elif (n & 0xc0) == 0xc0:
            if off + 2 > len(buf):
                raise dpkt.NeedData("truncated compression pointer")
            ptr = struct.unpack('>H', buf[off:off + 2])[0] & 0x3fff
            # pointers only go backwards, which also rules out loops
            if ptr >= start_off:
                raise dpkt.UnpackError("invalid label compression pointer")
            off += 2
            if not saved_off:
                saved_off = off
            start_off = off = ptr
        elif (n & 0xc0) == 0x00:
            off += 1
            if off + n > len(buf):
                raise dpkt.NeedData("label runs past the end of the message")
            labels.append(buf[off:off + n])
            name_length += n + 1
            if name_length > 255:
                raise dpkt.UnpackError("name longer than 255 bytes")
            off += n
        else:
            raise dpkt.UnpackError(f"invalid label length {n:02x}")
    if not saved_off:
        saved_off = off
    if not labels:
        return ".", saved_off
    return ".".join(escape_label(label) for label in labels) + ".", saved_off


class WireDNS(dpkt.dns.DNS):
    """dpkt DNS message that reads owner names with unpack_name.

    Names may hold any byte; dpkt alone decodes them as UTF-8.
    """

    def unpack_q(self, buf, off):
        q = self.Q()
        q.name, off = unpack_name(buf, off)
        if off + 4 > len(buf):
            raise dpkt.NeedData("question runs past the end of the message")
        q.type, q.cls = struct.unpack('>HH', buf[off:off + 4])
        return q, off + 4

    def unpack_rr(self, buf, off):
        rr = self.RR()
        rr.name, off = unpack_name(buf, off)
        if off + 10 > len(buf):
            raise dpkt.NeedData("record header runs past the end of the message")
        rr.type, rr.cls, rr.ttl, rdlen = struct.unpack('>HHIH', buf[off:off + 10])
        off += 10
        if off + rdlen > len(buf):
            raise dpkt.NeedData("record data runs past the end of the message")
        rr.rdata = buf[off:off + rdlen]
        rr.rlen = rdlen
        if rr.type in RDATA_TYPES:
            try:
                rr.unpack_rdata(buf, off)
            except UnicodeDecodeError:
                # dpkt decodes names and strings only after walking them
                pass
        return rr, off + rdlen


@dataclass(slots=True)
class Question:
    """One question entry. name is fully qualified, the root zone is '.'"""

    name: str
    qclass: int
    qtype: int

    @property
    def class_name(self) -> str:
        return get_class_name(self.qclass)

    @property
    def type_name(self) -> str:
        return get_type_name(self.qtype)


@dataclass(slots=True)
class DNSMessage:
    """Decoded DNS message, reduced to what the log line needs"""

    id: int
    questions: List[Question] = field(default_factory=list)

    @property
    def question(self) -> Optional[Question]:
        return self.questions[0] if self.questions else None


def unpack_dns_message(payload: Optional[bytes]) -> DNSMessage:
    """Decode a complete wire-format message.

    The whole message is unpacked, not just the question section, so a
    malformed record anywhere fails the message. Raises DNSParseFailure.
    """
    if not payload:
        raise DNSParseFailure("empty message")
    if len(payload) < DNS_HEADER_LEN:
        raise DNSParseFailure(f"message of {len(payload)} bytes is shorter than the header")

    try:
        dns = WireDNS(payload)
    except dpkt.NeedData as e:
        raise DNSParseFailure(f"truncated message: {e}" if str(e) else "truncated message") from e
    except dpkt.UnpackError as e:
        raise DNSParseFailure(str(e) or "malformed message") from e
    except (struct.error, IndexError) as e:
        # short fixed-size rdata surfaces as plain Python errors
        raise DNSParseFailure(str(e) or e.__class__.__name__) from e

    return DNSMessage(
        id=dns.id,
        questions=[Question(q.name, q.cls, q.type) for q in dns.qd],
    )


def parse_dns_message(payload: Optional[bytes]) -> Optional[DNSMessage]:
    """Decode a message, None if it cannot be decoded"""
    try:
        return unpack_dns_message(payload)
    except DNSParseFailure:
        return None


class DNSAnalyzer:
    """DNS payload decoder with failure accounting"""

    def __init__(self):
        self.logger = get_logger(__name__)
        self.stats = {
            'total_messages': 0,
            'parsed_messages': 0,
            'parse_errors': 0,
            'empty_payloads': 0,
        }

    def analyze(self, payload: Optional[bytes], context: str = "message") -> Optional[DNSMessage]:
        """Decode payload, logging a warning and returning None on failure.

        context describes the payload in the warning, e.g.
        "query message (10.0.0.1:5353 -> 10.0.0.53:53)".
        """
        self.stats['total_messages'] += 1
        if not payload:
            self.stats['empty_payloads'] += 1

        try:
            message = unpack_dns_message(payload)
        except DNSParseFailure as e:
            self.stats['parse_errors'] += 1
            self.logger.warning(f"unable to unpack {context}: {e}")
            return None

        self.stats['parsed_messages'] += 1
        return message

    def get_stats(self) -> Dict[str, Any]:
        """Get analyzer statistics"""
        stats = self.stats.copy()
        if stats['total_messages'] > 0:
            stats['error_ratio'] = stats['parse_errors'] / stats['total_messages']
        return stats
