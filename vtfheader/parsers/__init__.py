__all__ = [
    "ByteCursor",
    "VTFParser",
    "VTFManager",
    "VtfFlags",
    "decode_flags",
    "ImageFormat",
    "format_name",
    "parse_key_values",
    "ResourceTag",
    "ResourceDispatcher",
]

_LOCATIONS = {
    "ByteCursor": "byte_cursor",
    "VTFParser": "vtf_parser",
    "VTFManager": "vtf_parser",
    "VtfFlags": "flags",
    "decode_flags": "flags",
    "ImageFormat": "formats",
    "format_name": "formats",
    "parse_key_values": "keyvalues",
    "ResourceTag": "resources",
    "ResourceDispatcher": "resources",
}

def __getattr__(name):
    if name in _LOCATIONS:
        import importlib
        module = importlib.import_module(f".{_LOCATIONS[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(name)
