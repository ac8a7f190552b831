from __future__ import annotations

import io
from pathlib import Path

import pytest

from lc3vm.bus import Memory, MemorySystem
from lc3vm.loader import ImageFormatError, load_image, load_image_from_path


def _memory() -> MemorySystem:
    ms = MemorySystem()
    ms.allocate_space()
    ms.register_memory(Memory(0x0000, 0x10000))
    return ms


def _image(origin: int, *words: int) -> bytes:
    data = bytearray(origin.to_bytes(2, "big"))
    for word in words:
        data += word.to_bytes(2, "big")
    return bytes(data)


def test_load_image_places_big_endian_words() -> None:
    ms = _memory()

    program = load_image(io.BytesIO(_image(0x3000, 0x1234, 0xF025)), ms, name="demo")

    assert program.name == "demo"
    assert program.origin == 0x3000
    assert program.word_count == 2
    assert program.regions[0].start == 0x3000
    assert program.regions[0].end == 0x3001
    assert ms.read(0x3000) == 0x1234
    assert ms.read(0x3001) == 0xF025
    assert ms.read(0x3002) == 0x0000


def test_header_only_image_loads_nothing() -> None:
    ms = _memory()

    program = load_image(io.BytesIO(_image(0x4000)), ms)

    assert program.origin == 0x4000
    assert program.word_count == 0
    assert program.regions == []


def test_image_may_fill_to_top_of_memory() -> None:
    ms = _memory()

    load_image(io.BytesIO(_image(0xFFFE, 0x0001, 0x0002)), ms)

    assert ms.read(0xFFFF) == 0x0002
    assert ms.read(0x0000) == 0x0000


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"\x30",
        _image(0x3000, 0x1234) + b"\x56",
        _image(0xFFFF, 0x0001, 0x0002),
    ],
)
def test_malformed_images_leave_memory_untouched(payload: bytes) -> None:
    ms = _memory()

    with pytest.raises(ImageFormatError):
        load_image(io.BytesIO(payload), ms)

    assert ms.read(0x3000) == 0x0000
    assert ms.read(0xFFFF) == 0x0000


def test_later_image_overwrites_earlier(tmp_path: Path) -> None:
    first = tmp_path / "first.obj"
    second = tmp_path / "second.obj"
    first.write_bytes(_image(0x3000, 0x1111, 0x2222))
    second.write_bytes(_image(0x3001, 0x3333))
    ms = _memory()

    load_image_from_path(first, ms)
    program = load_image_from_path(second, ms)

    assert program.name == "second.obj"
    assert ms.read(0x3000) == 0x1111
    assert ms.read(0x3001) == 0x3333


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_image_from_path(tmp_path / "missing.obj", _memory())
