"""Loader for LC-3 object images.

An image is a big-endian origin word followed by big-endian program words that
are stored contiguously from the origin.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO

from lc3vm.bus import ADDRESS_SPACE, MemorySystem
from lc3vm.utils import debug_enabled, debug_log

from .program import ProgramImage


class ImageFormatError(RuntimeError):
    """Raised when an object image violates the expected structure."""


HEADER_SIZE = 2
WORD_SIZE = 2


def load_image(stream: BinaryIO, memory: MemorySystem, *, name: str = "") -> ProgramImage:
    """Load an object image from ``stream`` into ``memory`` and return metadata.

    The whole image is validated before anything is written, so a malformed
    image leaves memory untouched.
    """

    loader = _ImageLoader(stream, memory, name)
    return loader.load()


def load_image_from_path(path: Path, memory: MemorySystem) -> ProgramImage:
    """Load an object image from the filesystem."""

    with path.open("rb") as handle:
        return load_image(handle, memory, name=path.name)


class _ImageLoader:
    def __init__(self, stream: BinaryIO, memory: MemorySystem, name: str) -> None:
        self._stream = stream
        self._memory = memory
        self._name = name

    def load(self) -> ProgramImage:
        header = self._stream.read(HEADER_SIZE)
        if len(header) < HEADER_SIZE:
            raise ImageFormatError("image is missing its origin header")
        (origin,) = struct.unpack(">H", header)

        payload = self._stream.read()
        if len(payload) % WORD_SIZE:
            raise ImageFormatError("image ends with a truncated word")

        count = len(payload) // WORD_SIZE
        capacity = ADDRESS_SPACE - origin
        if count > capacity:
            raise ImageFormatError(
                f"image of {count} words does not fit at origin {origin:#06x} ({capacity} words available)"
            )

        words = struct.unpack(f">{count}H", payload)
        self._memory.load_words(origin, words)

        program = ProgramImage(name=self._name, origin=origin)
        if count:
            program.add_region(origin, origin + count - 1)
        if debug_enabled("loader"):
            debug_log("loader", "loaded %s origin=%04x words=%d", self._name or "<stream>", origin, count)
        return program
