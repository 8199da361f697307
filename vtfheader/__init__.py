"""
VTF Header Parser
Decode Valve Texture Format headers and resource directories

Reads the fixed header fields, the version dependent depth and resource
table, and the KVD key value block of a VTF file. Pixel data is not decoded.

Modules:
    config: Configuration management
    core: Decoded file model and error kinds
    parsers: Byte cursor, flag/format tables, resource dispatcher, header decoder
    utils: Logging and error bookkeeping
"""

__version__ = "1.0.0"
__license__ = "MIT"
__description__ = "Valve Texture Format header parser"

from .config import Config, ParserConfig, LoggingConfig, get_config
from .core.models import VTFFile
from .core.exceptions import (
    VTFError,
    TruncatedInputError,
    InvalidSignatureError,
    InvalidResourceCountError,
    InvalidResourceOffsetError,
)
from .parsers.vtf_parser import VTFParser, VTFManager
from .io import load, loads

__all__ = [
    # Configuration
    'Config', 'ParserConfig', 'LoggingConfig', 'get_config',

    # Model
    'VTFFile',

    # Errors
    'VTFError', 'TruncatedInputError', 'InvalidSignatureError',
    'InvalidResourceCountError', 'InvalidResourceOffsetError',

    # Parsing
    'VTFParser', 'VTFManager', 'load', 'loads',
]


def get_version() -> str:
    """Return the package version."""
    return __version__
