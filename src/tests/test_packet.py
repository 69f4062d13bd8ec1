"""Tests for DNS message decoding."""

import logging
import struct

import dpkt
import pytest

from dnstaplog.packet import (
    DNSAnalyzer,
    DNSMessage,
    get_class_name,
    escape_label,
    get_type_name,
    parse_dns_message,
    unpack_dns_message,
    unpack_name,
)
from dnstaplog.exceptions import DNSParseFailure

from helpers import build_dns_message


class TestMnemonics:
    """Test class and type mnemonics."""

    @pytest.mark.parametrize("qclass,name", [(1, "IN"), (3, "CH"), (4, "HS"), (255, "ANY"), (31337, "CLASS31337")])
    def test_class_names(self, qclass, name):
        assert get_class_name(qclass) == name

    @pytest.mark.parametrize("qtype,name", [(1, "A"), (2, "NS"), (15, "MX"), (28, "AAAA"), (65, "HTTPS"), (128, "NXNAME"), (259, "DOA"), (262, "WALLET"), (11, "TYPE11"), (31337, "TYPE31337")])
    def test_type_names(self, qtype, name):
        assert get_type_name(qtype) == name


class TestUnpack:
    """Test wire-format decoding."""

    def test_question_decoded(self):
        message = unpack_dns_message(build_dns_message(qid=4711, name="foo.example.", qtype=15, qclass=1))

        assert isinstance(message, DNSMessage)
        assert message.id == 4711
        assert len(message.questions) == 1
        question = message.question
        assert question.name == "foo.example."
        assert question.type_name == "MX"
        assert question.class_name == "IN"

    def test_root_name(self):
        message = unpack_dns_message(build_dns_message(name=".", qtype=2))
        assert message.question.name == "."

    def test_response_id(self):
        message = unpack_dns_message(build_dns_message(qid=0xbeef, flags=0x8180))
        assert message.id == 0xbeef

    def test_empty_question_section(self):
        message = unpack_dns_message(build_dns_message(name=None))
        assert message.questions == []
        assert message.question is None

    @pytest.mark.parametrize("payload", [
        None,
        b"",
        b"\x12\x34\x01\x00",
        # question count 1 but no question bytes
        struct.pack("!HHHHHH", 1, 0, 1, 0, 0, 0),
        # compression pointer past the end of the message
        struct.pack("!HHHHHH", 1, 0, 1, 0, 0, 0) + b"\xc0\xff\x00\x01\x00\x01",
        # question name without type and class
        struct.pack("!HHHHHH", 1, 0, 1, 0, 0, 0) + b"\x03foo\x00",
    ])
    def test_malformed_payloads(self, payload):
        with pytest.raises(DNSParseFailure):
            unpack_dns_message(payload)
        assert parse_dns_message(payload) is None


class TestDNSAnalyzer:
    """Test analyzer accounting and diagnostics."""

    def test_counts_successes_and_failures(self):
        analyzer = DNSAnalyzer()
        assert analyzer.analyze(build_dns_message()) is not None
        assert analyzer.analyze(b"\x00") is None
        assert analyzer.analyze(None) is None

        stats = analyzer.get_stats()
        assert stats['total_messages'] == 3
        assert stats['parsed_messages'] == 1
        assert stats['parse_errors'] == 2
        assert stats['empty_payloads'] == 1
        assert stats['error_ratio'] == pytest.approx(2 / 3)

    def test_failure_logs_warning_with_context(self, caplog):
        analyzer = DNSAnalyzer()
        with caplog.at_level(logging.WARNING, logger="dnstaplog.packet"):
            analyzer.analyze(b"\x00\x01", context="query message (? -> ?)")

        assert "unable to unpack query message (? -> ?)" in caplog.text


class TestNames:
    """Test presentation form of names with arbitrary label bytes."""

    @pytest.mark.parametrize("wire,name", [
        (b"\x01\xff\x07example\x00", "\\255.example."),
        (b"\x03a.b\x07example\x00", "a\\.b.example."),
        (b"\x03a b\x07example\x00", "a\\032b.example."),
        (b"\x02\xc3\xa9\x07example\x00", "\\195\\169.example."),
        (b"\x04a\\$\"\x00", "a\\\\\\$\\\"."),
        (b"\x01*\x03_tcp\x00", "*._tcp."),
    ])
    def test_question_name_escaped(self, wire, name):
        message = unpack_dns_message(build_dns_message(name=wire))
        assert message.question.name == name

    def test_dot_inside_label_differs_from_two_labels(self):
        one_label = unpack_dns_message(build_dns_message(name=b"\x03a.b\x00"))
        two_labels = unpack_dns_message(build_dns_message(name=b"\x01a\x01b\x00"))
        assert one_label.question.name == "a\\.b."
        assert two_labels.question.name == "a.b."

    def test_escape_label(self):
        assert escape_label(b"(x);@") == "\\(x\\)\\;\\@"
        assert escape_label(b"\x00\x7f") == "\\000\\127"
        assert escape_label(b"") == ""

    def test_compressed_name(self):
        # name at offset 0: "example.", then "www" + pointer to offset 0
        buf = b"\x07example\x00\x03www\xc0\x00"
        name, off = unpack_name(buf, 9)
        assert name == "www.example."
        assert off == len(buf)

    def test_forward_pointer_rejected(self):
        buf = b"\xc0\x02\x00"
        with pytest.raises(dpkt.UnpackError):
            unpack_name(buf, 0)

    def test_non_utf8_answer_record(self):
        # response with the question repeated as a CNAME owner, rdata pointing at it
        question = b"\x01\xff\x07example\x00"
        header = struct.pack("!HHHHHH", 7, 0x8180, 1, 1, 0, 0)
        rdata = b"\xc0\x0c"
        answer = b"\xc0\x0c" + struct.pack("!HHIH", 5, 1, 300, len(rdata)) + rdata
        payload = header + question + struct.pack("!HH", 1, 1) + answer

        message = unpack_dns_message(payload)
        assert message.question.name == "\\255.example."

    def test_unsupported_record_type_is_opaque(self):
        # HTTPS answer, which dpkt does not interpret
        header = struct.pack("!HHHHHH", 7, 0x8180, 1, 1, 0, 0)
        question = b"\x07example\x00" + struct.pack("!HH", 65, 1)
        rdata = b"\x00\x01\x00"
        answer = b"\xc0\x0c" + struct.pack("!HHIH", 65, 1, 300, len(rdata)) + rdata

        message = unpack_dns_message(header + question + answer)
        assert message.question.name == "example."
        assert message.question.type_name == "HTTPS"

    def test_record_data_past_end_fails(self):
        header = struct.pack("!HHHHHH", 7, 0x8180, 0, 1, 0, 0)
        answer = b"\x00" + struct.pack("!HHIH", 1, 1, 300, 4) + b"\x7f\x00"
        assert parse_dns_message(header + answer) is None

    def test_valid_name_is_not_a_parse_error(self, caplog):
        analyzer = DNSAnalyzer()
        with caplog.at_level(logging.WARNING, logger="dnstaplog.packet"):
            message = analyzer.analyze(build_dns_message(name=b"\x01\xff\x07example\x00"))

        assert message.question.name == "\\255.example."
        assert analyzer.get_stats()['parse_errors'] == 0
        assert "unable to unpack" not in caplog.text
