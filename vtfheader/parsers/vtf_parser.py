import io
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple, Any

import numpy as np

from vtfheader.config import ParserConfig, get_config
from vtfheader.core.exceptions import (
    InvalidResourceCountError,
    InvalidSignatureError,
    VTFError,
)
from vtfheader.core.models import VTFFile, has_depth_field, has_resource_table
from vtfheader.parsers.byte_cursor import ByteCursor
from vtfheader.parsers.flags import decode_flags
from vtfheader.parsers.formats import format_name
from vtfheader.parsers.resources import (
    RESOURCE_ENTRY_SIZE,
    ResourceDirectory,
    ResourceDispatcher,
)
from vtfheader.utils.error_handler import ErrorCategory, ErrorHandler, ErrorSeverity

logger = logging.getLogger(__name__)

VTF_SIGNATURE = b"VTF\x00"


def read_reflectivity(cursor: ByteCursor) -> Tuple[float, float, float]:
    """Read the reflectivity vector (3 x float32)"""
    values = np.frombuffer(cursor.read_bytes(12), dtype="<f4", count=3)
    reflectivity = (float(values[0]), float(values[1]), float(values[2]))
    logger.debug(f"Reflectivity: {reflectivity[0]} {reflectivity[1]} {reflectivity[2]}")
    return reflectivity


class VTFParser:
    """Decoder for VTF headers and resource directories"""

    def __init__(self, config: Optional[ParserConfig] = None):
        """
        Args:
            config: Parser settings, the global configuration's parser section when omitted

        Raises:
            ValueError: if the settings fail validation
        """
        self.config = config or get_config().parser

        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid parser configuration: {'; '.join(errors)}")

    def parse(self, data: bytes, name: str = "") -> VTFFile:
        return self.parse_stream(io.BytesIO(data), name=name)

    def parse_file(self, path) -> VTFFile:
        logger.debug(f"Opening: {path}")
        with open(path, "rb") as f:
            return self.parse_stream(f, name=str(path))

    def parse_stream(self, stream: BinaryIO, name: str = "") -> VTFFile:
        """
        Decode a VTF header from a seekable binary stream

        Args:
            stream: Stream positioned at the start of the VTF data
            name: Name recorded on the result (usually the file path)

        Returns:
            Fully populated VTFFile

        Raises:
            InvalidSignatureError: leading bytes are not the VTF magic
            TruncatedInputError: the stream ends before a required field
            InvalidResourceCountError: resource count out of bounds
            InvalidResourceOffsetError: KVD offset outside the stream
        """
        cursor = ByteCursor(stream)

        self._read_signature(cursor)

        version_major = cursor.read_i32()
        version_minor = cursor.read_i32()
        logger.debug(f"VTF Version {version_major}.{version_minor}")

        header_size = cursor.read_i32()
        logger.debug(f"Header Size: {header_size} Bytes")

        width = cursor.read_i16()
        height = cursor.read_i16()
        logger.debug(f"Texture Dimensions: {width} X {height}")

        flags, flag_names = decode_flags(cursor.read_u32())

        frame_count = cursor.read_i16()
        first_frame = cursor.read_i16()
        logger.debug(f"Amount of Frames: {frame_count}, First Frame: {first_frame}")

        # Padding
        cursor.skip(4)

        reflectivity = read_reflectivity(cursor)

        # Padding
        cursor.skip(4)

        bump_scale = cursor.read_f32()
        logger.debug(f"Bumpmap Scale: {bump_scale}")

        high_res_format = cursor.read_i32()
        logger.debug(f"Texture Format: {format_name(high_res_format)}")

        mipmap_count = cursor.read_u8()
        logger.debug(f"Amount of Mipmaps: {mipmap_count}")

        low_res_format = cursor.read_u32()
        logger.debug(f"Thumbnail Format: {format_name(low_res_format)}")

        thumb_width = cursor.read_u8()
        thumb_height = cursor.read_u8()
        logger.debug(f"Thumbnail Dimensions: {thumb_width} X {thumb_height}")

        texture_depth = 0
        resource_count = 0
        directory = ResourceDirectory()

        if has_depth_field(version_minor):
            texture_depth = cursor.read_i16()
            logger.debug(f"Texture Depth: {texture_depth}")

        if has_resource_table(version_minor):
            # Padding
            cursor.skip(3)
            resource_count = self._read_resource_count(cursor)

            dispatcher = ResourceDispatcher(header_size, self.config)
            directory = dispatcher.read_directory(cursor, resource_count)

        vtf_file = VTFFile(
            version_major=version_major,
            version_minor=version_minor,
            header_size=header_size,
            width=width,
            height=height,
            flags=flags,
            flag_names=tuple(flag_names),
            frame_count=frame_count,
            first_frame=first_frame,
            reflectivity=reflectivity,
            bump_scale=bump_scale,
            high_res_format=high_res_format,
            mipmap_count=mipmap_count,
            low_res_format=low_res_format,
            thumb_width=thumb_width,
            thumb_height=thumb_height,
            texture_depth=texture_depth,
            resource_count=resource_count,
            tags=tuple(directory.tags),
            key_values=tuple(directory.key_values),
            lod_clamp=directory.lod_clamp,
            file_path=name,
        )

        logger.info(
            f"Parsed {name or '<buffer>'}: VTF {version_major}.{version_minor}, "
            f"{width} X {height}, {format_name(high_res_format)}, "
            f"{len(directory.tags)} resources"
        )
        return vtf_file

    def _read_signature(self, cursor: ByteCursor) -> None:
        signature = cursor.read_bytes(len(VTF_SIGNATURE))
        if signature != VTF_SIGNATURE:
            raise InvalidSignatureError(signature)

    def _read_resource_count(self, cursor: ByteCursor) -> int:
        count = cursor.read_i32()
        logger.debug(f"Number of Resources: {count}")

        # Padding
        cursor.skip(8)

        if count < 0:
            raise InvalidResourceCountError(count, "count is negative")

        if count > self.config.max_resource_count:
            raise InvalidResourceCountError(
                count, f"more than {self.config.max_resource_count} entries"
            )

        if count * RESOURCE_ENTRY_SIZE > cursor.remaining():
            raise InvalidResourceCountError(
                count, f"only {cursor.remaining()} bytes left for the directory"
            )

        return count


class VTFManager:
    """Manager for parsing multiple VTF files"""

    def __init__(self, config: Optional[ParserConfig] = None,
                 error_handler: Optional[ErrorHandler] = None):
        self.parser = VTFParser(config)
        self.error_handler = error_handler or ErrorHandler()
        self.parsed_files: Dict[str, VTFFile] = {}
        self.failed_files: Dict[str, str] = {}

    def parse_files(self, paths: Iterable, max_workers: int = 4) -> Dict[str, VTFFile]:
        """
        Parse multiple VTF files, continuing past failures

        Args:
            paths: VTF file paths
            max_workers: Maximum number of parallel workers

        Returns:
            Dictionary mapping file paths to decoded headers
        """
        paths = [str(path) for path in paths]
        logger.info(f"Parsing {len(paths)} VTF files")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_file = {
                executor.submit(self.parser.parse_file, path): path
                for path in paths
            }

            for future in as_completed(future_to_file):
                path = future_to_file[future]
                try:
                    self.parsed_files[path] = future.result()
                except VTFError as e:
                    self._record_failure(path, e, ErrorCategory.PARSING, e.error_code)
                except FileNotFoundError as e:
                    self._record_failure(path, e, ErrorCategory.FILE_IO, "FILE_2001")
                except PermissionError as e:
                    self._record_failure(path, e, ErrorCategory.FILE_IO, "FILE_2002")
                except OSError as e:
                    self._record_failure(path, e, ErrorCategory.FILE_IO, "FILE_2006")

        logger.info(f"Successfully parsed {len(self.parsed_files)} out of {len(paths)} files")
        return self.parsed_files.copy()

    def _record_failure(self, path: str, error: Exception,
                        category: ErrorCategory, error_code: str):
        self.failed_files[path] = str(error)
        self.error_handler.handle_error(
            error,
            severity=ErrorSeverity.ERROR,
            category=category,
            error_code=error_code,
            context={'file_path': path, 'file_name': Path(path).name}
        )

    def get_file(self, path) -> Optional[VTFFile]:
        return self.parsed_files.get(str(path))

    def list_files(self) -> List[str]:
        return list(self.parsed_files.keys())

    def get_summary(self) -> Dict[str, Any]:
        """Get counts of parsed and failed files"""
        return {
            'parsed': len(self.parsed_files),
            'failed': len(self.failed_files),
            'compressed': sum(1 for f in self.parsed_files.values() if f.is_compressed()),
            'animated': sum(1 for f in self.parsed_files.values() if f.is_animated()),
            'with_key_values': sum(1 for f in self.parsed_files.values() if f.has_key_values()),
            'failures': dict(self.failed_files)
        }

    def clear(self):
        self.parsed_files.clear()
        self.failed_files.clear()
