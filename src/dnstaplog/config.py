"""
Configuration management for dnstaplog
"""

import yaml
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path

from .constants import DEFAULT_MAX_FRAME_SIZE, LOG_LEVELS
from .formatter import FormatOptions


@dataclass
class ReaderConfig:
    """Frame Streams input configuration"""
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE  # bytes
    content_type: Optional[str] = None  # e.g. "protobuf:dnstap.Dnstap"


@dataclass
class OutputConfig:
    """Log line output configuration"""
    print_id: bool = False

    def to_options(self) -> FormatOptions:
        return FormatOptions(print_id=self.print_id)


@dataclass
class TapLogConfig:
    """Main configuration"""
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cpuprofile: Optional[str] = None


def _section(cls, data: Any, name: str):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    return cls(**data)


class ConfigManager:
    """Configuration manager for dnstaplog"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file
        self.config = TapLogConfig()

        if config_file and Path(config_file).exists():
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from YAML file"""
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top level must be a mapping")

            top_level = {'reader', 'output', 'log_level', 'log_file', 'cpuprofile'}
            unknown = set(data) - top_level
            if unknown:
                raise ValueError(f"Unknown keys: {', '.join(sorted(unknown))}")

            self.config.reader = _section(ReaderConfig, data.get('reader'), 'reader')
            self.config.output = _section(OutputConfig, data.get('output'), 'output')

            if 'log_level' in data:
                level = str(data['log_level']).upper()
                if level not in LOG_LEVELS:
                    raise ValueError(f"Invalid log level: {data['log_level']}")
                self.config.log_level = level
            if 'log_file' in data: self.config.log_file = data['log_file']
            if 'cpuprofile' in data: self.config.cpuprofile = data['cpuprofile']

            if self.config.reader.max_frame_size <= 0:
                raise ValueError("reader.max_frame_size must be positive")

        except Exception as e:
            raise ValueError(f"Failed to load config from {config_file}: {e}")

    def save_to_file(self, config_file: str) -> None:
        """Save current configuration to YAML file"""
        config_dict = {
            'reader': asdict(self.config.reader),
            'output': asdict(self.config.output),
            'log_level': self.config.log_level,
            'log_file': self.config.log_file,
            'cpuprofile': self.config.cpuprofile,
        }

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def get_config(self) -> TapLogConfig:
        """Get the current configuration"""
        return self.config
