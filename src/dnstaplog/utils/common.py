"""
Common utility functions for dnstaplog
"""

from pathlib import Path
from typing import Any


def ensure_directory(path: Any) -> None:
    """Ensure directory exists, create if not"""
    if isinstance(path, str):
        path = Path(path)
    path.mkdir(parents=True, exist_ok=True)


def ensure_parent(file_path: Any) -> Path:
    """Ensure the directory holding file_path exists"""
    if isinstance(file_path, str):
        file_path = Path(file_path)
    ensure_directory(file_path.parent)
    return file_path


def format_bytes(bytes_count: int) -> str:
    """Format bytes count to human readable string"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024.0
    return f"{bytes_count:.1f} TB"
