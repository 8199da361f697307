from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from vtfheader.parsers.formats import (
    NO_THUMBNAIL_FORMAT,
    format_name,
    is_compressed_format,
)


# Texture depth is stored from 7.2 onwards, the resource table from 7.3
DEPTH_MIN_VERSION_MINOR = 2
RESOURCES_MIN_VERSION_MINOR = 3


def has_depth_field(version_minor: int) -> bool:
    return version_minor >= DEPTH_MIN_VERSION_MINOR


def has_resource_table(version_minor: int) -> bool:
    return version_minor >= RESOURCES_MIN_VERSION_MINOR


@dataclass(frozen=True)
class VTFFile:
    """Decoded header of a single VTF file"""
    version_major: int
    version_minor: int
    header_size: int
    width: int
    height: int
    flags: int
    frame_count: int
    first_frame: int
    reflectivity: Tuple[float, float, float]
    bump_scale: float
    high_res_format: int
    mipmap_count: int
    low_res_format: int  # unsigned, NO_THUMBNAIL_FORMAT when absent
    thumb_width: int
    thumb_height: int
    flag_names: Tuple[str, ...] = ()
    texture_depth: int = 0
    resource_count: int = 0
    tags: Tuple[str, ...] = ()
    key_values: Tuple[Tuple[str, str], ...] = ()
    lod_clamp: Optional[Tuple[int, int]] = None
    file_path: str = field(default="", compare=False)

    def depth_present(self) -> bool:
        return has_depth_field(self.version_minor)

    def resources_present(self) -> bool:
        return has_resource_table(self.version_minor)

    def is_compressed(self) -> bool:
        """Check if the high resolution image uses a DXT format"""
        return is_compressed_format(self.high_res_format)

    def is_animated(self) -> bool:
        return self.frame_count > 1

    def has_mipmaps(self) -> bool:
        return self.mipmap_count != 0

    def has_thumbnail(self) -> bool:
        return self.low_res_format != NO_THUMBNAIL_FORMAT

    def has_flags(self) -> bool:
        return self.flags != 0

    def has_key_values(self) -> bool:
        return len(self.key_values) > 0

    def get_version(self) -> Tuple[int, int]:
        return (self.version_major, self.version_minor)

    def get_high_res_format_name(self) -> str:
        return format_name(self.high_res_format)

    def get_low_res_format_name(self) -> str:
        return format_name(self.low_res_format)

    def get_value(self, key: str) -> Optional[str]:
        """Get the first value stored under a key"""
        for entry_key, entry_value in self.key_values:
            if entry_key == key:
                return entry_value
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'file_path': self.file_path,
            'version': [self.version_major, self.version_minor],
            'header_size': self.header_size,
            'width': self.width,
            'height': self.height,
            'flags': self.flags,
            'flag_names': list(self.flag_names),
            'frame_count': self.frame_count,
            'first_frame': self.first_frame,
            'reflectivity': list(self.reflectivity),
            'bump_scale': self.bump_scale,
            'high_res_format': self.high_res_format,
            'high_res_format_name': self.get_high_res_format_name(),
            'mipmap_count': self.mipmap_count,
            'low_res_format': self.low_res_format,
            'low_res_format_name': self.get_low_res_format_name(),
            'thumb_width': self.thumb_width,
            'thumb_height': self.thumb_height,
            'texture_depth': self.texture_depth,
            'resource_count': self.resource_count,
            'tags': list(self.tags),
            'key_values': [list(pair) for pair in self.key_values],
            'lod_clamp': list(self.lod_clamp) if self.lod_clamp else None,
            'is_compressed': self.is_compressed(),
            'is_animated': self.is_animated(),
            'has_mipmaps': self.has_mipmaps(),
            'has_thumbnail': self.has_thumbnail()
        }
