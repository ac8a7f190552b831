from lc3vm.utils.trace import TraceRecorder


def _regs(*values):
    return tuple(values) + (0,) * (8 - len(values))


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(0x3000, 0x1021, _regs(1), "P", halted=False, mnemonic="ADD")
    recorder.record_step(0x3001, 0x5020, _regs(0), "Z", halted=False, mnemonic="AND")
    recorder.record_step(0x3002, 0xF025, _regs(0), "Z", halted=True, mnemonic="TRAP", note="halt")

    assert len(recorder) == 2
    lines = list(recorder.format_entries())
    assert len(lines) == 2
    assert "pc=3001" in lines[0]
    assert "pc=3002" in lines[1]
    assert "word=F025" in lines[1]
    assert "flags=HALT,halt" in lines[1]
    assert recorder.last_entry().mnemonic == "TRAP"


def test_trace_recorder_handles_missing_word():
    recorder = TraceRecorder(1)
    recorder.record_step(0x4000, None, _regs(0xFFFF), "N", halted=False, note="fault")

    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "word=----" in lines[0]
    assert "R0=FFFF" in lines[0]
    assert "CC=N" in lines[0]
    assert "flags=fault" in lines[0]


def test_trace_limit_returns_most_recent():
    recorder = TraceRecorder(4)
    for pc in range(0x3000, 0x3004):
        recorder.record_step(pc, 0, _regs(), "Z", halted=False)

    assert [entry.pc for entry in recorder.entries(2)] == [0x3002, 0x3003]
    assert TraceRecorder(1).last_entry() is None
