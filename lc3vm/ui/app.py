"""Console application wrapper around the LC-3 machine."""

from __future__ import annotations

import contextlib
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import ContextManager, List, TextIO

from lc3vm.cpu import CPUError
from lc3vm.cpu.registers import PC_START
from lc3vm.io import Console, ConsoleError, TerminalConsole
from lc3vm.loader import ImageFormatError, ProgramImage, load_image_from_path
from lc3vm.system import Machine, MachineConfig, create_machine
from lc3vm.utils import debug_enabled, debug_log

EXIT_HALTED = 0
EXIT_FAULT = 1
EXIT_IO_ERROR = 2
EXIT_INTERRUPTED = 130

TRACE_CAPACITY = 512


@dataclass
class AppConfig:
    """Configuration for the command-line front end."""

    image_paths: List[Path] = field(default_factory=list)
    start_at_origin: bool = False
    strict_operands: bool = True
    raw_terminal: bool = True


class LC3App:
    """Loads images into a fresh machine and runs it to completion."""

    def __init__(self, config: AppConfig, *, console: Console | None = None, stderr: TextIO | None = None) -> None:
        self._config = config
        self._console = console
        self._stderr = stderr
        self._machine: Machine | None = None

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> int:
        """Run the configured images and return the process exit code."""

        try:
            machine = self._create_machine()
            programs = self._load_images(machine)
        except RuntimeError as exc:
            self._report(str(exc))
            return EXIT_IO_ERROR
        self._machine = machine

        entry = self._entry_point(programs)
        machine.cpu.reset(entry)
        if debug_enabled("cpu"):
            debug_log("cpu", "entry=%04x images=%d", entry, len(programs))

        try:
            with self._terminal_mode(machine.console):
                machine.cpu.run()
        except CPUError as exc:
            self._report(str(exc))
            self._dump_trace(machine)
            return EXIT_FAULT
        except ConsoleError as exc:
            self._report(str(exc))
            return EXIT_IO_ERROR
        except KeyboardInterrupt:
            self._report("interrupted")
            return EXIT_INTERRUPTED
        return EXIT_HALTED

    def _create_machine(self) -> Machine:
        trace_capacity = TRACE_CAPACITY if debug_enabled("trace") else None
        return create_machine(
            MachineConfig(
                strict_operands=self._config.strict_operands,
                console=self._console,
                trace_capacity=trace_capacity,
            )
        )

    def _load_images(self, machine: Machine) -> List[ProgramImage]:
        if not self._config.image_paths:
            raise RuntimeError("at least one image file is required")
        programs: List[ProgramImage] = []
        for path in self._config.image_paths:
            try:
                programs.append(load_image_from_path(path, machine.memory))
            except FileNotFoundError as exc:
                raise RuntimeError(f"image file not found: {path}") from exc
            except OSError as exc:
                raise RuntimeError(f"failed to read image {path}: {exc}") from exc
            except ImageFormatError as exc:
                raise RuntimeError(f"failed to load image {path}: {exc}") from exc
        return programs

    def _entry_point(self, programs: List[ProgramImage]) -> int:
        if self._config.start_at_origin and programs:
            return programs[0].origin
        return PC_START

    def _terminal_mode(self, console: Console) -> ContextManager[None]:
        if self._config.raw_terminal and isinstance(console, TerminalConsole):
            return console.raw_mode()
        return contextlib.nullcontext()

    def _dump_trace(self, machine: Machine) -> None:
        if machine.trace is not None:
            machine.trace.dump("trace", limit=64)

    def _report(self, message: str) -> None:
        stream = self._stderr if self._stderr is not None else sys.stderr
        print(f"lc3vm: {message}", file=stream)

