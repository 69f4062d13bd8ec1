"""
Exception hierarchy for dnstaplog

Fatal conditions (schema, framing, I/O) propagate to the CLI, which
reports them and exits with a nonzero status. DNS parse failures are
per-record and never leave the pipeline.
"""


class DnstapLogError(Exception):
    """Base class for all dnstaplog errors"""


class SchemaViolation(DnstapLogError):
    """Envelope does not follow the dnstap schema (missing or unknown type)"""


class FrameCorruption(DnstapLogError):
    """Frame Streams container is malformed or truncated"""


class DNSParseFailure(DnstapLogError):
    """DNS wire-format payload could not be decoded"""


class IOFailure(DnstapLogError):
    """Input could not be opened or output could not be written"""
