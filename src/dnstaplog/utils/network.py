"""
Network utility functions for dnstaplog
"""
import ipaddress
from typing import Optional, Union

UNKNOWN = "?"

AddressLike = Union[ipaddress.IPv4Address, ipaddress.IPv6Address, bytes]


def format_host(address: AddressLike) -> str:
    """
        Address text: dotted quad for IPv4 and IPv4-mapped IPv6, RFC 5952 for
        IPv6, '?' plus hex for raw bytes of any other length
    """
    if isinstance(address, bytes):
        return f"{UNKNOWN}{address.hex()}"
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return str(address.ipv4_mapped)
    return str(address)


def format_address(address: Optional[AddressLike], port: Optional[int]) -> str:
    """
        10.10.10.10:31337, or ? when no address was recorded
    """
    if address is None:
        return UNKNOWN
    return f"{format_host(address)}:{port if port is not None else UNKNOWN}"
