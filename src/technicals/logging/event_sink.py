"""Per-run ledger of record outcomes, one JSON object per line."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from technicals.domain.events import RunEvent


class JsonlEventSink:
    """Appends each record outcome of a batch run to `events.jsonl`."""

    def __init__(self, path: str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = output_path

    def emit(self, event: RunEvent) -> None:
        record = event.to_record()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True))
            handle.write("\n")


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """Read a run ledger back, or an empty list when the run wrote none."""
    records: list[dict[str, Any]] = []
    input_path = Path(path)
    if not input_path.exists():
        return records
    with input_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            text = line.strip()
            if not text:
                continue
            records.append(json.loads(text))
    return records
