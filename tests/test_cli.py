"""
vyrun CLI Tests

Runs vyrun.main() in-process with an argv list and checks exit codes and
the report printed on stdout.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json

import pytest
import vyrun


def _write(tmp_path, text, name="prog.asm"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestRun:

    def test_demo_program(self, capsys):
        assert vyrun.main([]) == vyrun.EXIT_OK
        out = capsys.readouterr().out
        assert "HALTED after 7 steps" in out
        assert "stack:     []" in out

    def test_json_report(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH 5\nPSH 6\nADD\nHLT\n")
        assert vyrun.main([path, "--format", "json"]) == vyrun.EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["stack"] == [11]
        assert data["status"] == "HALTED"
        assert data["ip"] == 4

    def test_trace(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH 5\nPOP\nHLT\n")
        assert vyrun.main([path, "--trace"]) == vyrun.EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("0000: PSH 5")
        assert "0001: POP" in out

    def test_listing(self, tmp_path, capsys):
        path = _write(tmp_path, "top: PSH 1\nJMP top\n")
        assert vyrun.main([path, "--listing"]) == vyrun.EXIT_OK
        out = capsys.readouterr().out
        assert "top:" in out
        assert "0001    JMP -1" in out


class TestFailures:

    def test_fault_exit_code(self, tmp_path, capsys):
        path = _write(tmp_path, "POP\nHLT\n")
        assert vyrun.main([path, "--format", "json", "-q"]) == vyrun.EXIT_FAULT
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "FAULTED"
        assert data["fault"].startswith("STACK_UNDERFLOW")

    def test_negative_max_steps_rejected(self, tmp_path, capsys):
        """argparse refuses it with exit code 2 before anything runs"""
        path = _write(tmp_path, "PSH 1\nHLT\n")
        with pytest.raises(SystemExit) as exc:
            vyrun.main([path, "--max-steps", "-1"])
        assert exc.value.code == 2
        assert "0 or more" in capsys.readouterr().err

    def test_zero_max_steps_is_unlimited(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH 1\nPSH 2\nADD\nHLT\n")
        assert vyrun.main([path, "--max-steps", "0", "-q"]) == vyrun.EXIT_OK

    def test_missing_halt(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH 1\n")
        assert vyrun.main([path, "-q"]) == vyrun.EXIT_FAULT
        assert "ILLEGAL_INSTRUCTION" in capsys.readouterr().out

    def test_step_ceiling(self, tmp_path, capsys):
        path = _write(tmp_path, "loop: PSH 1\nPOP\nJMP loop\n")
        code = vyrun.main([path, "--max-steps", "30", "--format", "json", "-q"])
        assert code == vyrun.EXIT_STEP_LIMIT
        data = json.loads(capsys.readouterr().out)
        assert data["steps"] == 30
        assert data["status"] == "RUNNING"

    def test_missing_file(self, tmp_path, capsys):
        code = vyrun.main([str(tmp_path / "nope.asm")])
        assert code == vyrun.EXIT_INPUT
        assert "File not found" in capsys.readouterr().err

    def test_assembly_error(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH\nHLT\n")
        assert vyrun.main([path]) == vyrun.EXIT_INPUT
        assert "Assembly error" in capsys.readouterr().err

    def test_empty_program(self, tmp_path, capsys):
        path = _write(tmp_path, "; nothing\n")
        assert vyrun.main([path]) == vyrun.EXIT_INPUT
        assert "MALFORMED_PROGRAM" in capsys.readouterr().err


class TestLogging:

    def test_log_file_gets_debug(self, tmp_path, capsys):
        path = _write(tmp_path, "PSH 2\nPSH 3\nMUL\nHLT\n")
        log_path = tmp_path / "logs" / "run.log"
        assert vyrun.main([path, "--log-file", str(log_path), "-q"]) == vyrun.EXIT_OK
        text = log_path.read_text(encoding="utf-8")
        assert "mul: 2 3 -> 6" in text
        assert "halting..." in text

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            vyrun.main(["--version"])
        assert exc.value.code == 0
        assert "vyrun" in capsys.readouterr().out
