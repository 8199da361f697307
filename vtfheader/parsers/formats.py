from enum import IntEnum


class ImageFormat(IntEnum):
    """Image format codes used for the high and low resolution images"""
    NONE = -1
    RGBA8888 = 0
    ABGR8888 = 1
    RGB888 = 2
    BGR888 = 3
    RGB565 = 4
    I8 = 5
    IA88 = 6
    P8 = 7
    A8 = 8
    RGB888_BLUESCREEN = 9
    BGR888_BLUESCREEN = 10
    ARGB8888 = 11
    BGRA8888 = 12
    DXT1 = 13
    DXT3 = 14
    DXT5 = 15
    BGRX8888 = 16
    BGR565 = 17
    BGRX5551 = 18
    BGRA4444 = 19
    DXT1_ONEBITALPHA = 20
    BGRA5551 = 21
    UV88 = 22
    UVWQ8888 = 23
    RGBA16161616F = 24
    RGBA16161616 = 25
    UVLX8888 = 26
    R32F = 27
    RGB323232F = 28
    RGBA32323232F = 29
    NV_DST16 = 30
    NV_DST24 = 31
    NV_INTZ = 32
    NV_RAWZ = 33
    ATI_DST16 = 34
    ATI_DST24 = 35
    NV_NULL = 36
    ATI2N = 37
    ATI1N = 38


# The thumbnail format is read unsigned, so NONE shows up as 0xFFFFFFFF
NO_THUMBNAIL_FORMAT = 0xFFFFFFFF

UNKNOWN_FORMAT_NAME = "UNKNOWN"

# DXT1, DXT3 and DXT5 are the only block-compressed entries
COMPRESSED_FORMAT_RANGE = (ImageFormat.DXT1, ImageFormat.DXT5)


def format_name(code: int) -> str:
    """Resolve a format code (signed or unsigned) to its name"""
    if code == NO_THUMBNAIL_FORMAT:
        code = ImageFormat.NONE

    try:
        return ImageFormat(code).name
    except ValueError:
        return UNKNOWN_FORMAT_NAME


def is_compressed_format(code: int) -> bool:
    low, high = COMPRESSED_FORMAT_RANGE
    return low <= code <= high
