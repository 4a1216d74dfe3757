import io
import json
import tempfile
import unittest
from pathlib import Path

from partition_memory import Strategy
from simulator.config import SimulatorConfig
from simulator.run_simulator import build_config, main, parse_args


class ArgumentTests(unittest.TestCase):
    def test_positional_configuration(self) -> None:
        args = parse_args(["150", "2", "cmds.txt", "--map-style", "table"])
        config = build_config(args, io.StringIO(), io.StringIO())
        self.assertEqual(config.memory_size, 150)
        self.assertEqual(config.strategy, Strategy.BEST_FIT)
        self.assertEqual(config.input_file, "cmds.txt")
        self.assertEqual(config.map_style, "table")

    def test_malformed_invocations_exit_nonzero(self) -> None:
        for argv in (["50", "1"], ["200", "4"], ["abc", "1"], ["200", "1", "f.txt", "extra"], ["200", "1", "--batch"]):
            with self.assertRaises(SystemExit) as ctx:
                parse_args(argv)
            self.assertNotEqual(ctx.exception.code, 0, argv)

    def test_interactive_prompts_clamp_and_default(self) -> None:
        stdin = io.StringIO("lots\n40\n7\nn\n")
        stdout = io.StringIO()
        config = build_config(parse_args([]), stdin, stdout)
        self.assertEqual(config.memory_size, 100)
        self.assertEqual(config.strategy, Strategy.FIRST_FIT)
        self.assertIsNone(config.input_file)
        output = stdout.getvalue()
        self.assertIn("Please enter a whole number.", output)
        self.assertIn("Minimum size is 100. Using 100 units.", output)
        self.assertIn("Invalid algorithm. Using First Fit by default.", output)

    def test_interactive_prompts_accept_values(self) -> None:
        config = build_config(parse_args([]), io.StringIO("300\n3\nn\n"), io.StringIO())
        self.assertEqual(config.memory_size, 300)
        self.assertEqual(config.strategy, Strategy.WORST_FIT)

    def test_config_rejects_small_memory(self) -> None:
        with self.assertRaises(ValueError):
            SimulatorConfig(memory_size=99)


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_script_then_interactive_session(self) -> None:
        script = self.tmpdir / "cmds.txt"
        script.write_text("A A 10\nA B 20\nL A\n", encoding="utf-8")
        stdout = io.StringIO()
        code = main(["100", "2", str(script)], stdin=io.StringIO("A C 5\nM\nQ\n"), stdout=stdout)
        self.assertEqual(code, 0)
        output = stdout.getvalue()
        self.assertIn("- Algorithm: Best Fit", output)
        self.assertIn("Continuing in interactive mode...", output)
        self.assertIn("[C: 5][Libre: 5][B: 20][Libre: 70]", output)

    def test_unreadable_startup_script_fails(self) -> None:
        code = main(["100", "1", str(self.tmpdir / "missing.txt")], stdin=io.StringIO(), stdout=io.StringIO())
        self.assertEqual(code, 1)

    def test_binary_file_in_shell_does_not_end_session(self) -> None:
        binary = self.tmpdir / "bin.dat"
        binary.write_bytes(b"\xff\xfe\x00garbage\n")
        stdout = io.StringIO()
        code = main(["100", "1"], stdin=io.StringIO(f"F {binary}\nA c 5\nM\nQ\n"), stdout=stdout)
        self.assertEqual(code, 0)
        output = stdout.getvalue()
        self.assertIn("Error: Could not read file", output)
        self.assertIn("[c: 5][Libre: 95]", output)

    def test_batch_mode_writes_trace(self) -> None:
        script = self.tmpdir / "cmds.txt"
        script.write_text("A A 10\nL A\n", encoding="utf-8")
        trace_dir = self.tmpdir / "trace"
        stdin = io.StringIO("A never 10\n")
        code = main(
            ["120", "1", str(script), "--batch", "--trace-dir", str(trace_dir)],
            stdin=stdin,
            stdout=io.StringIO(),
        )
        self.assertEqual(code, 0)
        jsonl_files = list(trace_dir.glob("*.jsonl"))
        self.assertEqual(len(jsonl_files), 1)
        events = [json.loads(line)["event"] for line in jsonl_files[0].read_text(encoding="utf-8").splitlines()]
        self.assertEqual(events, ["allocate", "deallocate"])

    def test_interactive_configuration_with_selected_script(self) -> None:
        scripts = self.tmpdir / "Test"
        scripts.mkdir()
        (scripts / "demo.txt").write_text("A demo 40\n", encoding="utf-8")
        stdin = io.StringIO("200\n1\ny\n1\nS\nQ\n")
        stdout = io.StringIO()
        code = main(["--scripts-dir", str(scripts)], stdin=stdin, stdout=stdout)
        self.assertEqual(code, 0)
        output = stdout.getvalue()
        self.assertIn("Selected file: demo.txt", output)
        self.assertIn("- Used memory: 40 units (20.00%)", output)


if __name__ == "__main__":
    unittest.main()
