"""Tests for the audit log line formatter."""

import ipaddress

import pytest

from dnstaplog.envelope import Envelope, MessageType, SocketProtocol
from dnstaplog.formatter import (
    PLACEHOLDER_RECORD,
    FormatOptions,
    LineFormatter,
    format_record,
    format_timestamp,
)
from dnstaplog.packet import DNSMessage, Question
from dnstaplog.utils.network import format_address

from helpers import TIME_SEC


def make_envelope(msg_type=MessageType.CLIENT_QUERY, payload=b"x" * 37, **kwargs):
    defaults = dict(
        socket_protocol=SocketProtocol.UDP,
        query_address=ipaddress.ip_address("10.10.10.10"),
        query_port=31337,
        response_address=ipaddress.ip_address("10.0.0.53"),
        response_port=53,
        query_time_sec=TIME_SEC,
        query_time_nsec=412999999,
        response_time_sec=TIME_SEC + 1,
        response_time_nsec=0,
    )
    defaults.update(kwargs)
    if msg_type.name.endswith("_QUERY"):
        defaults.setdefault("query_message", payload)
    else:
        defaults.setdefault("response_message", payload)
    return Envelope(type=msg_type, **defaults)


def make_message(name="example.com.", qclass=1, qtype=1, qid=4711):
    return DNSMessage(id=qid, questions=[Question(name, qclass, qtype)])


class TestTimestamp:
    """Test timestamp rendering."""

    def test_milliseconds_truncated(self, utc):
        assert format_timestamp((TIME_SEC, 412999999)) == "27-Oct-2021 18:29:47.412"

    def test_nanoseconds_carry_into_seconds(self, utc):
        assert format_timestamp((TIME_SEC - 1, 1412000000)) == "27-Oct-2021 18:29:47.412"

    def test_day_zero_padded(self, utc):
        assert format_timestamp((0, 0)) == "01-Jan-1970 00:00:00.000"

    def test_absent_time(self):
        assert format_timestamp(None) == "?"


class TestRecord:
    """Test name/class/type rendering."""

    def test_trailing_dot_stripped(self):
        assert format_record(make_message("example.com.")) == "example.com/IN/A"

    def test_root_preserved(self):
        assert format_record(make_message(".", qtype=2)) == "./IN/NS"

    def test_unknown_class_and_type(self):
        assert format_record(make_message(qclass=31337, qtype=31337)) == "example.com/CLASS31337/TYPE31337"

    def test_no_message(self):
        assert format_record(None) is None

    def test_empty_question_section(self):
        assert format_record(DNSMessage(id=1)) is None

    def test_name_without_trailing_dot(self):
        assert format_record(make_message("example.com")) is None


class TestAddress:
    """Test address rendering."""

    def test_ipv4(self):
        assert format_address(ipaddress.ip_address("10.10.10.10"), 31337) == "10.10.10.10:31337"

    def test_ipv6(self):
        assert format_address(ipaddress.ip_address("2001:db8::1"), 53) == "2001:db8::1:53"

    def test_ipv4_mapped(self):
        assert format_address(ipaddress.ip_address("::ffff:192.0.2.1"), 53) == "192.0.2.1:53"

    def test_absent_address_hides_port(self):
        assert format_address(None, 31337) == "?"

    def test_absent_port(self):
        assert format_address(ipaddress.ip_address("10.0.0.1"), None) == "10.0.0.1:?"

    def test_raw_bytes(self):
        assert format_address(b"\x01\x02\x03", 53) == "?010203:53"


class TestLineFormatter:
    """Test complete lines."""

    def test_query_line(self, utc):
        line = LineFormatter().format(make_envelope(), make_message())
        assert line == (
            "27-Oct-2021 18:29:47.412 CQ 10.10.10.10:31337 -> 10.0.0.53:53 "
            "UDP 37b example.com/IN/A\n"
        )

    def test_response_line(self, utc):
        envelope = make_envelope(MessageType.CLIENT_RESPONSE, payload=b"y" * 64,
                                 socket_protocol=SocketProtocol.TCP)
        line = LineFormatter().format(envelope, make_message())
        assert line == (
            "27-Oct-2021 18:29:48.000 CR 10.10.10.10:31337 <- 10.0.0.53:53 "
            "TCP 64b example.com/IN/A\n"
        )

    @pytest.mark.parametrize("msg_type", list(MessageType))
    def test_arrow_follows_phase_only(self, msg_type):
        formatter = LineFormatter()
        expected = " -> " if msg_type.name.endswith("_QUERY") else " <- "
        for message in (make_message(), None):
            assert expected in formatter.format(make_envelope(msg_type), message)

    def test_unparseable_message(self, utc):
        line = LineFormatter(FormatOptions(print_id=True)).format(make_envelope(), None)
        assert line.endswith(f" 37b {PLACEHOLDER_RECORD}\n")
        assert "ID:" not in line

    def test_absent_payload_size_zero(self):
        envelope = make_envelope(query_message=None)
        assert " 0b " in LineFormatter().format(envelope, None)

    def test_absent_query_address(self):
        envelope = make_envelope(query_address=None, query_port=31337)
        line = LineFormatter().format(envelope, make_message())
        assert " CQ ? -> 10.0.0.53:53 " in line
        assert "31337" not in line

    def test_absent_protocol(self):
        envelope = make_envelope(socket_protocol=None)
        assert " ? 37b " in LineFormatter().format(envelope, make_message())

    def test_id_suffix(self):
        line = LineFormatter(FormatOptions(print_id=True)).format(make_envelope(), make_message(qid=31337))
        assert line.endswith("example.com/IN/A ID: 31337\n")

    def test_id_disabled_leaves_no_trailing_space(self):
        line = LineFormatter(FormatOptions(print_id=False)).format(make_envelope(), make_message())
        assert line.endswith("example.com/IN/A\n")

    def test_id_omitted_for_empty_question(self):
        line = LineFormatter(FormatOptions(print_id=True)).format(make_envelope(), DNSMessage(id=7))
        assert line.endswith(f"{PLACEHOLDER_RECORD}\n")
