import json
import os
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Any


@dataclass
class ParserConfig:
    """Configuration for the header decoder"""
    # Chunk size used when pulling the KVD text block off the stream
    read_chunk_size: int = 64

    # VTF files store at most 32 resource entries
    max_resource_count: int = 32

    text_encoding: str = "utf-8"

    def validate(self) -> List[str]:
        """Validate parser settings, return list of errors"""
        errors = []

        if self.read_chunk_size < 1:
            errors.append("Read chunk size must be at least 1 byte")

        if self.max_resource_count < 0:
            errors.append("Maximum resource count cannot be negative")

        try:
            "".encode(self.text_encoding)
        except LookupError:
            errors.append(f"Unknown text encoding: {self.text_encoding}")

        return errors


@dataclass
class LoggingConfig:
    """Configuration for log output"""
    level: str = "INFO"  # "DEBUG", "INFO", "WARNING", "ERROR"
    log_dir: str = ""
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False
    detailed_console: bool = False
    max_file_size_mb: int = 10
    backup_count: int = 5

    def validate(self) -> List[str]:
        """Validate logging settings"""
        errors = []

        if self.level.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            errors.append(f"Invalid log level: {self.level}")

        if self.max_file_size_mb < 1:
            errors.append("Maximum log file size must be at least 1MB")

        if self.backup_count < 0:
            errors.append("Backup count cannot be negative")

        if (self.enable_file or self.enable_json) and self.log_dir and os.path.isfile(self.log_dir):
            errors.append(f"Log directory is a file: {self.log_dir}")

        return errors


class Config:
    """Main configuration manager"""

    def __init__(self, config_file: Optional[str] = None):
        self.parser = ParserConfig()
        self.logging = LoggingConfig()

        self.config_dir = Path.home() / ".config" / "vtfheader"
        self.config_file = Path(config_file) if config_file else self.config_dir / "settings.json"

    def validate_all(self) -> Dict[str, List[str]]:
        """Validate all configuration sections"""
        return {
            'parser': self.parser.validate(),
            'logging': self.logging.validate()
        }

    def has_errors(self) -> bool:
        """Check if any configuration errors exist"""
        errors = self.validate_all()
        return any(errors.values())

    def get_error_summary(self) -> str:
        """Get formatted error summary"""
        errors = self.validate_all()

        if not any(errors.values()):
            return "No configuration errors"

        summary = "Configuration Errors:\n"
        for section, section_errors in errors.items():
            if section_errors:
                summary += f"\n{section.upper()}:\n"
                for error in section_errors:
                    summary += f"  - {error}\n"

        return summary

    def load(self, config_path: Optional[str] = None) -> bool:
        """
        Load configuration from a JSON file

        Missing files leave the defaults in place.

        Returns:
            True if a file was read
        """
        path = Path(config_path) if config_path else self.config_file

        if not path.exists():
            return False

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.from_dict(data)
        return True

    def _load_section(self, data: dict, section_name: str, section_obj):
        """Load a configuration section"""
        if section_name in data:
            for key, value in data[section_name].items():
                if hasattr(section_obj, key):
                    setattr(section_obj, key, value)

    def save(self, config_path: Optional[str] = None):
        """Save configuration to a JSON file"""
        path = Path(config_path) if config_path else self.config_file

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=4)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            'parser': asdict(self.parser),
            'logging': asdict(self.logging)
        }

    def from_dict(self, data: Dict[str, Any]):
        """Load configuration from dictionary"""
        self._load_section(data, 'parser', self.parser)
        self._load_section(data, 'logging', self.logging)

    def reset_to_defaults(self):
        """Reset configuration to defaults"""
        self.parser = ParserConfig()
        self.logging = LoggingConfig()


# Singleton instance
_config_instance = None

def get_config() -> Config:
    """Get global configuration instance"""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
        _config_instance.load()
    return _config_instance
