import csv
import json
import tempfile
from pathlib import Path

from partition_memory import MemoryManager, MemoryProfiler, Strategy


def read_json_lines(path: Path):
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                yield json.loads(line)


def test_profiler_flushes_jsonl_and_csv():
    with tempfile.TemporaryDirectory() as tmpdir:
        profiler = MemoryProfiler(run_id="trace", output_dir=str(Path(tmpdir) / "out"))
        manager = MemoryManager(100, profiler=profiler)
        manager.allocate("A", 30)
        manager.set_strategy(Strategy.WORST_FIT)
        manager.allocate("B", 500)
        manager.deallocate("A")

        jsonl_path, csv_path = profiler.flush()

        entries = list(read_json_lines(jsonl_path))
        assert [entry["event"] for entry in entries] == [
            "allocate",
            "set_strategy",
            "allocate_failed",
            "deallocate",
        ]
        assert entries[-1]["heap_free"] == 100
        assert [entry["seq"] for entry in entries] == [1, 2, 3, 4]

        with csv_path.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))
        assert len(rows) == 4
        assert rows[2]["error"] == "InsufficientContiguousMemory"
        assert rows[1]["previous"] == "first-fit"
        assert profiler.counts() == {"allocate": 1, "set_strategy": 1, "allocate_failed": 1, "deallocate": 1}


def test_flush_without_output_dir_is_noop():
    profiler = MemoryProfiler(run_id="memory-only")
    profiler.record_event("allocate", {"process": "A"})
    assert profiler.flush() is None
    assert profiler.events_of("allocate")[0]["process"] == "A"
