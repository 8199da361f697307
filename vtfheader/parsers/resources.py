import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from vtfheader.config import ParserConfig
from vtfheader.core.exceptions import InvalidResourceOffsetError
from vtfheader.parsers.byte_cursor import ByteCursor
from vtfheader.parsers.keyvalues import parse_key_values

logger = logging.getLogger(__name__)

# 3 byte tag + 1 flag byte + 4 byte payload
RESOURCE_ENTRY_SIZE = 8


class ResourceStrategy(Enum):
    """How the 4 payload bytes of a resource entry are read"""
    GENERIC = "generic"
    LOD = "lod"
    KEY_VALUES = "key_values"


class ResourceTag(Enum):
    """Known resource tags with their label and payload strategy"""
    THUMBNAIL = (b"\x01\x00\x00", "Thumbnail", ResourceStrategy.GENERIC)
    HIGH_RES_IMAGE = (b"\x30\x00\x00", "High Res Image", ResourceStrategy.GENERIC)
    PARTICLE_SHEET = (b"\x10\x00\x00", "Animated Particle Sheet", ResourceStrategy.GENERIC)
    CRC = (b"CRC", "CRC Data", ResourceStrategy.GENERIC)
    LOD = (b"LOD", "Level of Detail", ResourceStrategy.LOD)
    EXTENDED_FLAGS = (b"TSO", "Extended Custom Flags", ResourceStrategy.GENERIC)
    KEY_VALUES = (b"KVD", "Arbitrary KeyValues", ResourceStrategy.KEY_VALUES)
    UNKNOWN = (None, None, ResourceStrategy.GENERIC)

    def __init__(self, tag_bytes: Optional[bytes], label: Optional[str],
                 strategy: ResourceStrategy):
        self.tag_bytes = tag_bytes
        self.label = label
        self.strategy = strategy

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ResourceTag":
        return _TAGS_BY_BYTES.get(raw, cls.UNKNOWN)


_TAGS_BY_BYTES = {tag.tag_bytes: tag for tag in ResourceTag if tag.tag_bytes is not None}


@dataclass
class ResourceDirectory:
    """Everything collected while walking the resource directory"""
    tags: List[str] = field(default_factory=list)
    key_values: List[Tuple[str, str]] = field(default_factory=list)
    lod_clamp: Optional[Tuple[int, int]] = None
    stream_consumed: bool = False


class ResourceDispatcher:
    """Reads resource entries and branches on their tag"""

    def __init__(self, header_size: int, config: Optional[ParserConfig] = None):
        self.header_size = header_size
        self.config = config or ParserConfig()

    def read_directory(self, cursor: ByteCursor, count: int) -> ResourceDirectory:
        """
        Read count resource entries

        The KVD payload runs to the end of the stream, so entries listed
        after it are not read.

        Args:
            cursor: Cursor positioned at the first entry
            count: Number of entries in the directory

        Returns:
            ResourceDirectory with labels, key values and LOD clamp
        """
        directory = ResourceDirectory()

        for index in range(count):
            if directory.stream_consumed:
                logger.warning(
                    f"KVD block consumed the stream, skipping "
                    f"{count - index} remaining resource entries"
                )
                break
            self.dispatch(cursor, directory)

        return directory

    def dispatch(self, cursor: ByteCursor, directory: ResourceDirectory) -> ResourceTag:
        raw_tag = cursor.read_bytes(3)
        tag = ResourceTag.from_bytes(raw_tag)

        if tag.label:
            logger.debug(f"- {tag.label}")
            directory.tags.append(tag.label)
        else:
            logger.debug(f"- Unknown resource tag {raw_tag!r}")

        # Resource flag byte, unused
        cursor.skip(1)

        if tag.strategy is ResourceStrategy.LOD:
            self._read_lod(cursor, directory)
        elif tag.strategy is ResourceStrategy.KEY_VALUES:
            self._read_key_values(cursor, directory)
        else:
            cursor.skip(4)

        return tag

    def _read_lod(self, cursor: ByteCursor, directory: ResourceDirectory) -> None:
        clamp_u = cursor.read_u8()
        clamp_v = cursor.read_u8()
        logger.debug(f"  - Clamp U: {clamp_u}")
        logger.debug(f"  - Clamp V: {clamp_v}")
        directory.lod_clamp = (clamp_u, clamp_v)

        # LOD values only use 2 of the 4 payload bytes
        cursor.skip(2)

    def _read_key_values(self, cursor: ByteCursor, directory: ResourceDirectory) -> None:
        offset = cursor.read_i32()

        # Offset is absolute; the extra 4 bytes step over the block length
        skip = offset - self.header_size + 4
        remaining = cursor.remaining()
        if skip < 0 or skip > remaining:
            raise InvalidResourceOffsetError(offset, skip, remaining)
        cursor.skip(skip)

        blob = b"".join(cursor.iter_chunks(self.config.read_chunk_size))
        text = blob.decode(self.config.text_encoding, errors="replace")
        logger.debug(f"Key values ({len(blob)} bytes at offset {offset}):")

        directory.key_values.extend(parse_key_values(text))
        directory.stream_consumed = True
