import logging
from enum import IntFlag
from typing import List, Tuple

logger = logging.getLogger(__name__)


class VtfFlags(IntFlag):
    """Texture flags stored in the VTF header (one bit each)"""
    POINTSAMPLE = 0x00000001
    TRILINEAR = 0x00000002
    CLAMPS = 0x00000004
    CLAMPT = 0x00000008
    ANISOTROPIC = 0x00000010
    HINT_DXT5 = 0x00000020
    PWL_CORRECTED = 0x00000040
    NORMAL = 0x00000080
    NOMIP = 0x00000100
    NOLOD = 0x00000200
    ALL_MIPS = 0x00000400
    PROCEDURAL = 0x00000800
    ONEBITALPHA = 0x00001000
    EIGHTBITALPHA = 0x00002000
    ENVMAP = 0x00004000
    RENDERTARGET = 0x00008000
    DEPTHRENDERTARGET = 0x00010000
    NODEBUGOVERRIDE = 0x00020000
    SINGLECOPY = 0x00040000
    PRE_SRGB = 0x00080000
    NODEPTHBUFFER = 0x00800000
    CLAMPU = 0x02000000
    VERTEXTEXTURE = 0x04000000
    SSBUMP = 0x08000000
    BORDER = 0x20000000


def decode_flags(mask: int) -> Tuple[int, List[str]]:
    """
    Split a raw flag mask into the names of the flags it contains

    Args:
        mask: Raw 32-bit flag value from the header

    Returns:
        Tuple of (raw mask, flag names in declaration order)
    """
    names: List[str] = []

    if mask == 0:
        logger.debug("No flags found")
        return mask, names

    logger.debug(f"Flags: 0x{mask:08x}")
    for flag in VtfFlags.__members__.values():
        if mask & flag.value:
            logger.debug(f"- {flag.name:<30} (0x{flag.value:08x})")
            names.append(flag.name)

    return mask, names
