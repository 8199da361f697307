import io
import os
import struct
import tempfile
import unittest
from unittest.mock import patch

from vtfheader import load, loads
from vtfheader.config import Config, ParserConfig
from vtfheader.core.exceptions import (
    InvalidResourceCountError,
    InvalidResourceOffsetError,
    InvalidSignatureError,
    TruncatedInputError,
)
from vtfheader.parsers.byte_cursor import ByteCursor
from vtfheader.parsers.flags import VtfFlags
from vtfheader.parsers.formats import NO_THUMBNAIL_FORMAT
from vtfheader.parsers.resources import ResourceDirectory, ResourceDispatcher, ResourceTag
from vtfheader.parsers.vtf_parser import VTFManager, VTFParser

from tests.vtf_builder import (
    HIGH_RES_TAG,
    THUMBNAIL_TAG,
    build_vtf,
    build_vtf_with_key_values,
    header_length,
    kvd_entry,
    lod_entry,
    resource_entry,
)


class TestHeaderDecoding(unittest.TestCase):
    def test_fixed_fields(self):
        data = build_vtf(
            version_minor=1,
            width=512,
            height=64,
            flags=int(VtfFlags.CLAMPS | VtfFlags.NOMIP),
            frame_count=4,
            first_frame=2,
            reflectivity=(0.25, 0.5, 0.75),
            bump_scale=2.0,
            high_res_format=15,
            mipmap_count=10,
            low_res_format=13,
            thumb_width=16,
            thumb_height=4,
        )

        vtf = loads(data, name="fixed.vtf")

        self.assertEqual(vtf.get_version(), (7, 1))
        self.assertEqual(vtf.header_size, header_length(1))
        self.assertEqual((vtf.width, vtf.height), (512, 64))
        self.assertEqual(vtf.flag_names, ("CLAMPS", "NOMIP"))
        self.assertEqual((vtf.frame_count, vtf.first_frame), (4, 2))
        self.assertEqual(vtf.reflectivity, (0.25, 0.5, 0.75))
        self.assertEqual(vtf.bump_scale, 2.0)
        self.assertEqual(vtf.high_res_format, 15)
        self.assertEqual(vtf.mipmap_count, 10)
        self.assertEqual(vtf.low_res_format, 13)
        self.assertEqual((vtf.thumb_width, vtf.thumb_height), (16, 4))
        self.assertEqual(vtf.file_path, "fixed.vtf")

    def test_minor_zero_stops_after_fixed_header(self):
        data = build_vtf(version_minor=0, trailer=b"\xff" * 64)

        with patch("vtfheader.parsers.vtf_parser.ResourceDispatcher") as dispatcher:
            vtf = loads(data)

        dispatcher.assert_not_called()
        self.assertEqual(vtf.texture_depth, 0)
        self.assertEqual(vtf.resource_count, 0)
        self.assertEqual(vtf.tags, ())
        self.assertFalse(vtf.depth_present())
        self.assertFalse(vtf.resources_present())

    def test_minor_two_reads_depth_only(self):
        data = build_vtf(version_minor=2, depth=6, trailer=b"\xff" * 64)

        vtf = loads(data)

        self.assertEqual(vtf.texture_depth, 6)
        self.assertEqual(vtf.resource_count, 0)
        self.assertTrue(vtf.depth_present())
        self.assertFalse(vtf.resources_present())

    def test_signed_and_unsigned_fields(self):
        data = build_vtf(high_res_format=-1, low_res_format=NO_THUMBNAIL_FORMAT, first_frame=-1)

        vtf = loads(data)

        self.assertEqual(vtf.high_res_format, -1)
        self.assertEqual(vtf.low_res_format, 0xFFFFFFFF)
        self.assertEqual(vtf.first_frame, -1)
        self.assertFalse(vtf.has_thumbnail())


class TestDecodeFailures(unittest.TestCase):
    def test_bad_signature_stops_after_four_bytes(self):
        stream = io.BytesIO(b"DDS " + b"\x00" * 100)

        with self.assertRaises(InvalidSignatureError) as ctx:
            VTFParser().parse_stream(stream)

        self.assertEqual(ctx.exception.signature, b"DDS ")
        self.assertEqual(stream.tell(), 4)

    def test_truncated_after_signature(self):
        with self.assertRaises(TruncatedInputError):
            loads(b"VTF\x00\x07\x00")

    def test_empty_input(self):
        with self.assertRaises(TruncatedInputError):
            loads(b"")

    def test_truncated_inside_resource_table_header(self):
        data = build_vtf(version_minor=3, resources=[lod_entry(1, 2)])

        with self.assertRaises(TruncatedInputError):
            loads(data[:74])

    def test_negative_resource_count(self):
        data = build_vtf(version_minor=3, resource_count=-1, trailer=b"\x00" * 16)

        with self.assertRaises(InvalidResourceCountError) as ctx:
            loads(data)
        self.assertEqual(ctx.exception.count, -1)

    def test_resource_count_larger_than_data(self):
        data = build_vtf(version_minor=3, resources=[lod_entry(1, 2)], resource_count=3)

        with self.assertRaises(InvalidResourceCountError):
            loads(data)

    def test_resource_count_above_configured_limit(self):
        entries = [resource_entry(b"CRC")] * 3
        data = build_vtf(version_minor=3, resources=entries)

        with self.assertRaises(InvalidResourceCountError):
            loads(data, config=ParserConfig(max_resource_count=2))

    def test_absurd_resource_count(self):
        data = build_vtf(version_minor=3, resource_count=0x7FFFFFFF)

        with self.assertRaises(InvalidResourceCountError):
            loads(data)

    def test_kvd_offset_before_header_end(self):
        data = build_vtf(version_minor=3, resources=[kvd_entry(0)], trailer=b"x" * 32)

        with self.assertRaises(InvalidResourceOffsetError) as ctx:
            loads(data)
        self.assertEqual(ctx.exception.offset, 0)

    def test_kvd_offset_past_end_of_stream(self):
        data = build_vtf(version_minor=3, resources=[kvd_entry(10000)], trailer=b"x" * 32)

        with self.assertRaises(InvalidResourceOffsetError):
            loads(data)


class TestResourceDirectory(unittest.TestCase):
    def test_lod_entry(self):
        data = build_vtf(version_minor=3, resources=[lod_entry(4, 8)])

        vtf = loads(data)

        self.assertEqual(vtf.resource_count, 1)
        self.assertEqual(vtf.tags, ("Level of Detail",))
        self.assertEqual(vtf.lod_clamp, (4, 8))

    def test_generic_entries_keep_table_order(self):
        entries = [
            resource_entry(THUMBNAIL_TAG, struct.pack("<i", 104)),
            resource_entry(HIGH_RES_TAG, struct.pack("<i", 200)),
            resource_entry(b"CRC", b"\xde\xad\xbe\xef"),
            resource_entry(b"TSO", b"\x01\x00\x00\x00"),
            resource_entry(b"\x10\x00\x00"),
        ]
        data = build_vtf(version_minor=4, resources=entries)

        vtf = loads(data)

        self.assertEqual(vtf.tags, (
            "Thumbnail",
            "High Res Image",
            "CRC Data",
            "Extended Custom Flags",
            "Animated Particle Sheet",
        ))
        self.assertIsNone(vtf.lod_clamp)

    def test_unknown_tag_consumed_without_label(self):
        entries = [resource_entry(b"XYZ", b"\x01\x02\x03\x04"), lod_entry(1, 3)]
        data = build_vtf(version_minor=3, resources=entries)

        vtf = loads(data)

        self.assertEqual(vtf.resource_count, 2)
        self.assertEqual(vtf.tags, ("Level of Detail",))
        self.assertEqual(vtf.lod_clamp, (1, 3))

    def test_key_values_block(self):
        data = build_vtf_with_key_values(b'{"Information"{"foo" "1"}}')

        vtf = loads(data)

        self.assertEqual(vtf.tags, ("Arbitrary KeyValues",))
        self.assertEqual(vtf.key_values, (("foo", "1"),))
        self.assertTrue(vtf.has_key_values())

    def test_key_values_after_other_entries(self):
        text = b'"Information"\r\n{\r\n\t"author" "someone"\r\n\t"license" "cc0"\r\n}\r\n'
        data = build_vtf_with_key_values(
            text,
            leading_resources=[resource_entry(HIGH_RES_TAG), lod_entry(2, 2)],
        )

        vtf = loads(data, config=ParserConfig(read_chunk_size=5))

        self.assertEqual(vtf.tags, ("High Res Image", "Level of Detail", "Arbitrary KeyValues"))
        self.assertEqual(vtf.key_values, (("author", "someone"), ("license", "cc0")))
        self.assertEqual(vtf.get_value("license"), "cc0")

    def test_entries_after_key_values_are_skipped(self):
        header_size = header_length(3, 2)
        text = b'{"Information"{"foo" "1"}}'

        # One LOD entry still follows the KVD entry, so the offset is
        # relative to a cursor 8 bytes short of the header end
        data = build_vtf(
            version_minor=3,
            resources=[kvd_entry(header_size + 8), lod_entry(4, 8)],
            trailer=struct.pack("<I", len(text)) + text,
        )

        with self.assertLogs("vtfheader.parsers.resources", level="WARNING") as logs:
            vtf = loads(data)

        self.assertIn("skipping 1 remaining resource entries", logs.output[0])
        self.assertEqual(vtf.tags, ("Arbitrary KeyValues",))
        self.assertEqual(vtf.key_values, (("foo", "1"),))
        self.assertIsNone(vtf.lod_clamp)

    def test_dispatch_consumes_one_entry(self):
        cursor = ByteCursor.from_bytes(resource_entry(b"TSO", flag=0xff) + lod_entry(7, 9))
        dispatcher = ResourceDispatcher(header_size=80, config=ParserConfig())
        directory = ResourceDirectory()

        self.assertIs(dispatcher.dispatch(cursor, directory), ResourceTag.EXTENDED_FLAGS)
        self.assertEqual(cursor.position(), 8)

        self.assertIs(dispatcher.dispatch(cursor, directory), ResourceTag.LOD)
        self.assertEqual(cursor.remaining(), 0)
        self.assertEqual(directory.tags, ["Extended Custom Flags", "Level of Detail"])
        self.assertEqual(directory.lod_clamp, (7, 9))


class TestFileLoading(unittest.TestCase):
    def test_load_from_path(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "texture.vtf")
            with open(path, "wb") as f:
                f.write(build_vtf(version_minor=3, resources=[lod_entry(4, 8)]))

            vtf = load(path)

        self.assertEqual(vtf.file_path, path)
        self.assertEqual(vtf.tags, ("Level of Detail",))

    def test_missing_file_error_propagates(self):
        with self.assertRaises(FileNotFoundError):
            load("/nonexistent/texture.vtf")

    def test_stream_closed_on_failure(self):
        stream = io.BytesIO(b"NOPE" + b"\x00" * 60)

        with patch("vtfheader.parsers.vtf_parser.open", create=True, return_value=stream):
            with self.assertRaises(InvalidSignatureError):
                VTFParser().parse_file("broken.vtf")

        self.assertTrue(stream.closed)

    def test_stream_closed_on_success(self):
        stream = io.BytesIO(build_vtf())

        with patch("vtfheader.parsers.vtf_parser.open", create=True, return_value=stream):
            VTFParser().parse_file("good.vtf")

        self.assertTrue(stream.closed)


class TestParserConfiguration(unittest.TestCase):
    def test_saved_settings_reach_the_parser(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            settings_path = os.path.join(temp_dir, "settings.json")
            saved = Config(settings_path)
            saved.parser.max_resource_count = 0
            saved.save()

            config = Config(settings_path)
            self.assertTrue(config.load())

        data = build_vtf(version_minor=3, resources=[lod_entry(4, 8)])

        with patch("vtfheader.config._config_instance", config):
            self.assertIs(VTFParser().config, config.parser)
            self.assertIs(VTFManager().parser.config, config.parser)

            with self.assertRaises(InvalidResourceCountError):
                loads(data)

    def test_explicit_config_overrides_saved_settings(self):
        config = Config()
        config.parser.max_resource_count = 0
        data = build_vtf(version_minor=3, resources=[lod_entry(4, 8)])

        with patch("vtfheader.config._config_instance", config):
            vtf = loads(data, config=ParserConfig(max_resource_count=4))

        self.assertEqual(vtf.resource_count, 1)

    def test_invalid_config_rejected_before_reading(self):
        config = ParserConfig(text_encoding="no-such-codec", read_chunk_size=0)

        with self.assertRaises(ValueError) as ctx:
            loads(build_vtf_with_key_values(b'"Information" {"foo" "1"}'), config=config)

        self.assertIn("Unknown text encoding: no-such-codec", str(ctx.exception))
        self.assertIn("Read chunk size must be at least 1 byte", str(ctx.exception))

        with self.assertRaises(ValueError):
            VTFManager(config)


if __name__ == "__main__":
    unittest.main()
