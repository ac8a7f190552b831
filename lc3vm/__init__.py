"""Virtual machine for the LC-3 (Little Computer 3) architecture.

The package is split the same way the hardware is: ``bus`` holds the memory
map and the memory-mapped keyboard, ``cpu`` the register file, executor and
trap routines, ``io`` the console adapters, ``loader`` the object-image
reader, ``system`` the machine assembly and ``ui`` the command-line runner.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
