"""Binary Unicode table cache format (.rtab).

This module handles reading and writing the cache file that stores the
range and case tables built by tables.build_tables(), so a process can skip
the full code point sweep.

File format specification (version 1):

    ┌─────────────────────────────────────────────────────────────┐
    │ MAGIC (16 bytes): 🔤RUNETABL🔤 (UTF-8)                      │
    ├─────────────────────────────────────────────────────────────┤
    │ VERSION (4 bytes): uint32 LE                                │
    ├─────────────────────────────────────────────────────────────┤
    │ SPARE (4 bytes): uint32 LE (reserved)                       │
    ├─────────────────────────────────────────────────────────────┤
    │ PAYLOAD_LENGTH (8 bytes): uint64 LE                         │
    ├─────────────────────────────────────────────────────────────┤
    │ PAYLOAD (N bytes): MessagePack-encoded dict                 │
    │   unicode_version: str                                      │
    │   categories: {name: [[start, end], ...]}                   │
    │   to_upper / to_lower: [[from, to], ...]                    │
    └─────────────────────────────────────────────────────────────┘

Fixed header size: 32 bytes (magic + version + spare + payload_length)
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO

import msgpack

from runestr.internals.errors import TableFormatError
from runestr.unicode.tables import UnicodeTables


def _read_bytes(f: BinaryIO, size: int, path: str) -> bytes:
    """Read exact number of bytes with truncation detection.

    Raises:
        TableFormatError: TE4003 if truncated.
    """
    data = f.read(size)
    if len(data) != size:
        raise TableFormatError("TE4003", path=path, expected=size, actual=len(data))
    return data


class TableFormat:
    """Binary format reader/writer for .rtab files."""

    # Magic bytes: 🔤RUNETABL🔤 (each emoji is 4 UTF-8 bytes)
    MAGIC = b'\xf0\x9f\x94\xa4RUNETABL\xf0\x9f\x94\xa4'
    VERSION = 1
    FIXED_HEADER_SIZE = 32  # 16 (magic) + 4 (version) + 4 (spare) + 8 (payload_len)

    @staticmethod
    def write(output_path: Path, tables: UnicodeTables) -> None:
        """Write tables to an .rtab file."""
        payload = msgpack.packb(tables.to_payload(), use_bin_type=True)

        with open(output_path, 'wb') as f:
            f.write(TableFormat.MAGIC)
            f.write(struct.pack("<I", TableFormat.VERSION))
            f.write(struct.pack("<I", 0))  # SPARE
            f.write(struct.pack("<Q", len(payload)))
            f.write(payload)

    @staticmethod
    def read(table_path: Path) -> UnicodeTables:
        """Read an .rtab file.

        Raises:
            TableFormatError: TE4001-TE4004 for format errors.
        """
        path = str(table_path)

        with open(table_path, 'rb') as f:
            magic = _read_bytes(f, 16, path)
            if magic != TableFormat.MAGIC:
                raise TableFormatError("TE4001", path=path)

            header_rest = _read_bytes(f, 8, path)
            version = struct.unpack("<I", header_rest[0:4])[0]
            if version != TableFormat.VERSION:
                raise TableFormatError("TE4002", path=path,
                                       version=version, supported=TableFormat.VERSION)

            payload_len = struct.unpack("<Q", _read_bytes(f, 8, path))[0]
            blob = _read_bytes(f, payload_len, path)

        try:
            payload = msgpack.unpackb(blob, raw=False)
            return UnicodeTables.from_payload(payload)
        except (ValueError, KeyError, TypeError, msgpack.UnpackException) as e:
            raise TableFormatError("TE4004", path=path, reason=str(e)) from e
