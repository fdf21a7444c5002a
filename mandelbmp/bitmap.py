"""Encoding of 24-bit uncompressed Windows bitmap files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np

SIGNATURE = 0x4D42  # "BM"
FILE_HEADER = struct.Struct("<HIHHI")
INFO_HEADER = struct.Struct("<IiiHHIIiiII")
HEADER_SIZE = FILE_HEADER.size + INFO_HEADER.size
BITS_PER_PIXEL = 24
BYTES_PER_PIXEL = BITS_PER_PIXEL // 8
PIXELS_PER_METER = 2835  # 72 DPI
BI_RGB = 0


class BitmapFormatError(ValueError):
    """Raised when bytes do not hold a header this module can read."""


@dataclass(frozen=True)
class BitmapHeader:
    """Metadata carried by the file and info headers."""

    width: int
    height: int
    file_size: int
    image_size: int
    pixel_data_offset: int = HEADER_SIZE
    bits_per_pixel: int = BITS_PER_PIXEL
    x_pixels_per_meter: int = PIXELS_PER_METER
    y_pixels_per_meter: int = PIXELS_PER_METER


def row_padding(width: int) -> int:
    """Bytes appended to each row so its length is a multiple of 4."""

    return (4 - (width * BYTES_PER_PIXEL) % 4) % 4


def row_stride(width: int) -> int:
    return width * BYTES_PER_PIXEL + row_padding(width)


def image_size(width: int, height: int) -> int:
    return height * row_stride(width)


def build_header(width: int, height: int) -> BitmapHeader:
    if width <= 0 or height <= 0:
        raise ValueError(f"bitmap dimensions must be positive, got {width}x{height}")
    data_size = image_size(width, height)
    return BitmapHeader(
        width=width,
        height=height,
        file_size=HEADER_SIZE + data_size,
        image_size=data_size,
    )


def pack_header(header: BitmapHeader) -> bytes:
    """Serialize the 14-byte file header followed by the 40-byte info header."""

    file_header = FILE_HEADER.pack(SIGNATURE, header.file_size, 0, 0, header.pixel_data_offset)
    info_header = INFO_HEADER.pack(
        INFO_HEADER.size,
        header.width,
        header.height,
        1,
        header.bits_per_pixel,
        BI_RGB,
        header.image_size,
        header.x_pixels_per_meter,
        header.y_pixels_per_meter,
        0,
        0,
    )
    return file_header + info_header


def parse_header(data: bytes) -> BitmapHeader:
    """Read back the headers written by :func:`pack_header`."""

    if len(data) < HEADER_SIZE:
        raise BitmapFormatError(f"expected at least {HEADER_SIZE} header bytes, got {len(data)}")

    signature, file_size, _, _, offset = FILE_HEADER.unpack_from(data, 0)
    if signature != SIGNATURE:
        raise BitmapFormatError(f"bad signature 0x{signature:04X}")

    (
        info_size,
        width,
        height,
        planes,
        bits_per_pixel,
        compression,
        data_size,
        x_ppm,
        y_ppm,
        _,
        _,
    ) = INFO_HEADER.unpack_from(data, FILE_HEADER.size)
    if info_size != INFO_HEADER.size or planes != 1 or compression != BI_RGB:
        raise BitmapFormatError(
            f"unsupported info header (size={info_size}, planes={planes}, compression={compression})"
        )

    return BitmapHeader(
        width=width,
        height=height,
        file_size=file_size,
        image_size=data_size,
        pixel_data_offset=offset,
        bits_per_pixel=bits_per_pixel,
        x_pixels_per_meter=x_ppm,
        y_pixels_per_meter=y_ppm,
    )


def _check_pixels(pixels: np.ndarray, width: int, height: int) -> None:
    expected = (height, row_stride(width))
    if pixels.dtype != np.uint8 or pixels.shape != expected:
        raise ValueError(
            f"pixel buffer must be uint8 with shape {expected}, got {pixels.dtype} {pixels.shape}"
        )


def encode_bitmap(pixels: np.ndarray, width: int, height: int) -> bytes:
    """Return the complete file contents for a padded BGR pixel buffer."""

    _check_pixels(pixels, width, height)
    return pack_header(build_header(width, height)) + pixels.tobytes()


def write_bitmap(stream: BinaryIO, pixels: np.ndarray, width: int, height: int) -> int:
    """Write the file to an open binary stream and return the byte count."""

    data = encode_bitmap(pixels, width, height)
    stream.write(data)
    return len(data)
