"""
dnstaplog Utilities Package

This package contains utility functions and classes for dnstaplog:
- colors: Terminal status output utilities
- common: Common utility functions
- logger: Logging system
- network: Address rendering
"""

from .colors import (
    Colors,
    colorize,
    print_info,
    print_error
)

from .common import (
    ensure_directory,
    ensure_parent,
    format_bytes
)

from .logger import (
    setup_logger,
    get_logger,
    log_system_info
)

from .network import (
    format_address,
    format_host
)

__all__ = [
    # Color utilities
    'Colors',
    'colorize',
    'print_info',
    'print_error',

    # Common utilities
    'ensure_directory',
    'ensure_parent',
    'format_bytes',

    # Logger utilities
    'setup_logger',
    'get_logger',
    'log_system_info',

    # Network utilities
    'format_address',
    'format_host'
]
