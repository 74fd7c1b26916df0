"""Result writers for finished business records."""

import csv
import json
import threading
from typing import IO

from gmaps_enricher.models import CSV_HEADERS, BusinessRecord


class CsvWriter:
    def __init__(self, stream: IO[str]) -> None:
        self._writer = csv.writer(stream)
        self._stream = stream
        self._lock = threading.Lock()
        self._header_written = False

    def write(self, record: BusinessRecord) -> None:
        with self._lock:
            if not self._header_written:
                self._writer.writerow(CSV_HEADERS)
                self._header_written = True
            self._writer.writerow(record.csv_row())
            self._stream.flush()


class JsonWriter:
    """Writes one JSON object per line."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def write(self, record: BusinessRecord) -> None:
        line = json.dumps(record.to_dict(), ensure_ascii=False)
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
