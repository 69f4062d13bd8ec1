"""Constants for dnstaplog."""

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "cli": "dnstaplog.cli",
    "config": "dnstaplog.config",
    "conf": "dnstaplog.config",
    "envelope": "dnstaplog.envelope",
    "env": "dnstaplog.envelope",
    "frames": "dnstaplog.frames",
    "fstrm": "dnstaplog.frames",
    "packet": "dnstaplog.packet",
    "dns": "dnstaplog.packet",
    "formatter": "dnstaplog.formatter",
    "reader": "dnstaplog.reader",
    "utils": "dnstaplog.utils",
}

# Top-level modules within dnstaplog for auto-prefixing
KNOWN_TOP_MODULES = {
    "cli",
    "config",
    "envelope",
    "exceptions",
    "formatter",
    "frames",
    "packet",
    "reader",
    "schema",
    "utils",
}

ENV_LOG_LEVELS = "DNSTAPLOG_LOG_LEVELS"

# --- Frame Streams ---
FSTRM_CONTROL_ACCEPT = 0x01
FSTRM_CONTROL_START = 0x02
FSTRM_CONTROL_STOP = 0x03
FSTRM_CONTROL_READY = 0x04
FSTRM_CONTROL_FINISH = 0x05

FSTRM_CONTROL_FIELD_CONTENT_TYPE = 0x01

FSTRM_CONTROL_FRAME_LENGTH_MAX = 512

DNSTAP_CONTENT_TYPE = "protobuf:dnstap.Dnstap"

# --- Reader defaults ---
DEFAULT_MAX_FRAME_SIZE = 8192

# Timestamp, like 27-Oct-2021 18:29:47.412
TIME_FORMAT = "%d-%b-%Y %H:%M:%S"

# --- DNS ---
DNS_HEADER_LEN = 12

DNS_CLASSES = {
    1: "IN",
    2: "CS",
    3: "CH",
    4: "HS",
    254: "NONE",
    255: "ANY",
}

DNS_TYPES = {
    0: "None",
    1: "A",
    2: "NS",
    3: "MD",
    4: "MF",
    5: "CNAME",
    6: "SOA",
    7: "MB",
    8: "MG",
    9: "MR",
    10: "NULL",
    12: "PTR",
    13: "HINFO",
    14: "MINFO",
    15: "MX",
    16: "TXT",
    17: "RP",
    18: "AFSDB",
    19: "X25",
    20: "ISDN",
    21: "RT",
    23: "NSAP-PTR",
    24: "SIG",
    25: "KEY",
    26: "PX",
    27: "GPOS",
    28: "AAAA",
    29: "LOC",
    30: "NXT",
    31: "EID",
    32: "NIMLOC",
    33: "SRV",
    34: "ATMA",
    35: "NAPTR",
    36: "KX",
    37: "CERT",
    39: "DNAME",
    41: "OPT",
    42: "APL",
    43: "DS",
    44: "SSHFP",
    45: "IPSECKEY",
    46: "RRSIG",
    47: "NSEC",
    48: "DNSKEY",
    49: "DHCID",
    50: "NSEC3",
    51: "NSEC3PARAM",
    52: "TLSA",
    53: "SMIMEA",
    55: "HIP",
    56: "NINFO",
    57: "RKEY",
    58: "TALINK",
    59: "CDS",
    60: "CDNSKEY",
    61: "OPENPGPKEY",
    62: "CSYNC",
    63: "ZONEMD",
    64: "SVCB",
    65: "HTTPS",
    99: "SPF",
    100: "UINFO",
    101: "UID",
    102: "GID",
    103: "UNSPEC",
    104: "NID",
    105: "L32",
    106: "L64",
    107: "LP",
    108: "EUI48",
    109: "EUI64",
    128: "NXNAME",
    249: "TKEY",
    250: "TSIG",
    251: "IXFR",
    252: "AXFR",
    253: "MAILB",
    254: "MAILA",
    255: "ANY",
    256: "URI",
    257: "CAA",
    258: "AVC",
    259: "DOA",
    260: "AMTRELAY",
    261: "RESINFO",
    262: "WALLET",
    32768: "TA",
    32769: "DLV",
    65535: "Reserved",
}

# --- Log Levels ---
LOG_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}
