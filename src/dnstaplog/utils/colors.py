"""
Color utilities for dnstaplog terminal output

Status messages go to stderr; stdout is reserved for log lines.
"""

import sys


class Colors:
    """ANSI color codes for terminal output"""
    RED = '\033[91m'
    GREEN = '\033[92m'
    BLUE = '\033[94m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


def colorize(text: str, color: str) -> str:
    """Colorize text for terminal output"""
    return f"{color}{text}{Colors.RESET}"


def _tag(label: str, color: str) -> str:
    tag = f"[{label}]"
    return colorize(tag, color) if sys.stderr.isatty() else tag


def print_info(message: str) -> None:
    """Print info message"""
    print(f"{_tag('INFO', Colors.BLUE)} {message}", file=sys.stderr)


def print_error(message: str) -> None:
    """Print error message"""
    print(f"{_tag('ERROR', Colors.RED)} {message}", file=sys.stderr)
