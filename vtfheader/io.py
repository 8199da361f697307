from vtfheader.config import ParserConfig
from vtfheader.core.models import VTFFile
from vtfheader.parsers.vtf_parser import VTFParser


def load(path, config: ParserConfig = None) -> VTFFile:
    parser = VTFParser(config)
    return parser.parse_file(path)


def loads(data: bytes, name: str = "", config: ParserConfig = None) -> VTFFile:
    parser = VTFParser(config)
    return parser.parse(data, name=name)
