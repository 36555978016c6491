"""
Base normalizer abstraction and CSV reading shared by every broker export.
"""
import csv
import io
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path

import structlog

from strategy_ledger.errors import FileFormatError

logger = structlog.get_logger()


def first_value(row: Mapping, columns) -> str | None:
    """
    Return the value of the first column in *columns* that is present and
    non-empty in *row*, or None.
    """
    for col in columns:
        value = row.get(col)
        if value is None or value == "":
            continue
        return value
    return None


def _open_text(source):
    """Return a text stream for a path, a text buffer or a binary buffer."""
    if isinstance(source, (str, Path)):
        return open(source, newline="", encoding="utf-8-sig")
    if isinstance(source, io.TextIOBase):
        return source
    return io.TextIOWrapper(source, encoding="utf-8-sig", newline="")


def _align(fields: list, header: list, line_no: int) -> list:
    """
    Fit one data line to the header: short lines are padded with "", extra
    trailing fields are dropped. Columns never shift.
    """
    extra = fields[len(header):]
    if any(f.strip() for f in extra):
        logger.debug("csv_extra_fields_dropped", line=line_no, extra=len(extra))
    fields = fields[:len(header)]
    return fields + [""] * (len(header) - len(fields))


def read_csv_rows(source) -> list[dict]:
    """
    Read a CSV with a header row into a list of {column: string} dicts.

    *source* may be a path or an open text/binary buffer. Header names are
    stripped, every cell stays a string and blank lines are skipped. Values
    stay under the header they line up with: a trailing delimiter or any other
    surplus field is dropped, missing fields read as "". An empty file yields
    []. Anything that cannot be read as CSV raises FileFormatError.
    """
    if isinstance(source, (str, Path)) and not Path(source).is_file():
        raise FileFormatError(source, "file not found")

    header = None
    rows = []
    try:
        f = _open_text(source)
        try:
            reader = csv.reader(f)
            for fields in reader:
                # skip blank lines
                if not any(field.strip() for field in fields):
                    continue
                if header is None:
                    header = [h.lstrip("\ufeff").strip() for h in fields]
                    continue
                rows.append(dict(zip(header, _align(fields, header, reader.line_num))))
        finally:
            if isinstance(source, (str, Path)):
                f.close()
            elif f is not source:
                # leave the caller's binary buffer open
                f.detach()
    except (csv.Error, UnicodeDecodeError, OSError) as exc:
        raise FileFormatError(source, str(exc)) from exc
    return rows


class BaseCSVNormalizer(ABC):
    """
    Turns raw CSV rows into canonical records.

    Subclasses implement `parse_row(row) -> record | None`. A row that returns
    None or raises ValueError/TypeError/KeyError is dropped; one bad row never
    aborts the batch.
    """

    #: event name logged (at debug level) for each dropped row
    skip_event = "row_skipped"

    @abstractmethod
    def parse_row(self, row: Mapping):
        """Return one canonical record, or None if the row is not usable."""
        ...

    def normalize(self, rows: Iterable[Mapping]) -> list:
        records = []
        for line_no, row in enumerate(rows, start=1):
            try:
                record = self.parse_row(row)
            except (ValueError, TypeError, KeyError, AttributeError) as exc:
                logger.debug(self.skip_event, line=line_no, error=str(exc))
                continue
            if record is None:
                logger.debug(self.skip_event, line=line_no, reason="missing required field")
                continue
            records.append(record)
        return records

    def normalize_file(self, source) -> list:
        """Read *source* as CSV and normalize every row."""
        return self.normalize(read_csv_rows(source))
