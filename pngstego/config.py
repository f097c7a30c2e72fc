"""
pngstego Configuration.

A single dataclass holds the tunables shared by the controllers, the file
facade and the CLI. Configuration can be built from defaults, from a plain
dictionary, or from a JSON file.
"""

import json
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_OUTPUT_PREFIX = "embedded_"


@dataclass
class StegoConfig:
    """
    Configuration for embedding and extraction.

    Attributes:
        net_capacity: Report capacity net of the 32-bit length header.
            Off by default, so reported capacity includes the header bits
            and overstates usable room by 4 bytes.
        chunk_size: Number of payload bytes packed or unpacked per step.
        output_prefix: Prefix for the default embedded image file name.
    """
    net_capacity: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    output_prefix: str = DEFAULT_OUTPUT_PREFIX

    def __post_init__(self):
        if not isinstance(self.net_capacity, bool):
            raise ValueError(f"net_capacity must be true or false, got {self.net_capacity!r}")
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ValueError(f"chunk_size must be an integer, got {self.chunk_size!r}")
        if not isinstance(self.output_prefix, str):
            raise ValueError(f"output_prefix must be a string, got {self.output_prefix!r}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @classmethod
    def default(cls) -> 'StegoConfig':
        """Get default configuration."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StegoConfig':
        """Create configuration from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: str) -> 'StegoConfig':
        """Load configuration from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
