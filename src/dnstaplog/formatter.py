"""
Line formatter: one dnstap envelope in, one audit log line out

    27-Oct-2021 18:29:47.412 CQ 10.0.0.1:5353 -> 10.0.0.53:53 UDP 37b example.com/IN/A ID: 4711
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .constants import TIME_FORMAT
from .envelope import Envelope
from .packet import DNSMessage
from .utils.network import UNKNOWN, format_address

PLACEHOLDER_RECORD = "?/?/?"

NSEC_PER_SEC = 1_000_000_000
NSEC_PER_MSEC = 1_000_000


@dataclass(frozen=True)
class FormatOptions:
    """Operator toggles for the line format"""
    print_id: bool = False


def format_timestamp(active_time: Optional[Tuple[int, int]]) -> str:
    """Local time as 27-Oct-2021 18:29:47.412, milliseconds truncated"""
    if active_time is None:
        return UNKNOWN
    sec, nsec = active_time
    sec += nsec // NSEC_PER_SEC
    nsec %= NSEC_PER_SEC
    try:
        local = datetime.fromtimestamp(sec)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN
    return f"{local.strftime(TIME_FORMAT)}.{nsec // NSEC_PER_MSEC:03d}"


def format_record(message: Optional[DNSMessage]) -> Optional[str]:
    """name/class/type of the first question, None when there is nothing to show"""
    if message is None or not message.questions:
        return None
    question = message.questions[0]

    # The name is printed without the trailing dot unless it is the root zone
    name = question.name
    if name != ".":
        if not name.endswith("."):
            return None
        name = name[:-1]
    return f"{name}/{question.class_name}/{question.type_name}"


class LineFormatter:
    """Render envelopes and their decoded messages as log lines"""

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()

    def arrow(self, envelope: Envelope) -> str:
        # Points from the query side to the response side on the wire
        return "->" if envelope.is_query else "<-"

    def addresses(self, envelope: Envelope) -> Tuple[str, str]:
        return (
            format_address(envelope.query_address, envelope.query_port),
            format_address(envelope.response_address, envelope.response_port),
        )

    def format(self, envelope: Envelope, message: Optional[DNSMessage]) -> str:
        query_address, response_address = self.addresses(envelope)
        payload = envelope.active_message()
        protocol = envelope.socket_protocol.name if envelope.socket_protocol else UNKNOWN
        record = format_record(message)

        parts = [
            format_timestamp(envelope.active_time()),
            envelope.type.code,
            query_address,
            self.arrow(envelope),
            response_address,
            protocol,
            f"{len(payload) if payload else 0}b",
            record if record is not None else PLACEHOLDER_RECORD,
        ]
        line = " ".join(parts)

        if self.options.print_id and record is not None:
            line += f" ID: {message.id}"

        return line + "\n"
