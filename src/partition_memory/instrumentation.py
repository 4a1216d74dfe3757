from __future__ import annotations

import csv
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass
class MemoryProfiler:
    """
    Structured event recorder for MemoryManager.

    Each allocation, release and strategy change becomes one record carrying
    the heap usage after the operation. Records stay in memory until
    ``flush`` writes them out as ``<run_id>.jsonl`` and ``<run_id>.csv``.
    """

    run_id: str
    output_dir: Optional[str] = None
    events: List[Dict[str, object]] = field(default_factory=list)

    def record_event(self, event_type: str, payload: Dict[str, object]) -> None:
        self.events.append(
            {
                "seq": len(self.events) + 1,
                "timestamp": time.time(),
                "run_id": self.run_id,
                "event": event_type,
                **payload,
            }
        )

    def events_of(self, event_type: str) -> List[Dict[str, object]]:
        return [event for event in self.events if event["event"] == event_type]

    def counts(self) -> Dict[str, int]:
        return dict(Counter(str(event["event"]) for event in self.events))

    def flush(self) -> Optional[Tuple[Path, Path]]:
        """Write recorded events to ``output_dir``; returns the (jsonl, csv) paths."""
        if not self.output_dir or not self.events:
            return None
        output_path = Path(self.output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        jsonl_path = output_path / f"{self.run_id}.jsonl"
        csv_path = output_path / f"{self.run_id}.csv"

        with jsonl_path.open("w", encoding="utf-8") as handle:
            for record in self.events:
                handle.write(json.dumps(record) + "\n")

        # Events carry different payload keys; the CSV header is their union.
        fieldnames = ["seq", "timestamp", "run_id", "event"]
        for record in self.events:
            fieldnames.extend(key for key in record if key not in fieldnames)
        with csv_path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(self.events)
        return jsonl_path, csv_path
