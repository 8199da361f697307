__all__ = [
    "VTFFile",
    "VTFError",
    "TruncatedInputError",
    "InvalidSignatureError",
    "InvalidResourceCountError",
    "InvalidResourceOffsetError",
]

def __getattr__(name):
    if name == "VTFFile":
        from .models import VTFFile
        return VTFFile
    if name in __all__:
        from . import exceptions
        return getattr(exceptions, name)
    raise AttributeError(name)
