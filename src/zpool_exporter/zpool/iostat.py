import logging
from typing import List

from zpool_exporter.zpool.errors import MalformedRow, NumericParseFailure
from zpool_exporter.zpool.models import IoStatRecord

logger = logging.getLogger(__name__)

FIELD_NAMES = ("allocated", "free", "read_ops", "write_ops", "read_bandwidth", "write_bandwidth")
FIELD_COUNT = len(FIELD_NAMES) + 1
MAX_U64 = 2**64 - 1


def _parse_unsigned(line: str, field: str, value: str) -> int:
    # int() would also accept "+5", " 5" and "1_000"
    if not value.isdigit() or not value.isascii():
        raise NumericParseFailure(line, field, value)
    number = int(value)
    if number > MAX_U64:
        raise NumericParseFailure(line, field, value)
    return number


def parse_row(line: str) -> IoStatRecord:
    """
    Parses a single row of `zpool iostat -Hpv`.
    Format: name  alloc  free  read_ops  write_ops  read_bytes  write_bytes

    Raises MalformedRow for rows that do not have exactly seven non-empty
    fields and NumericParseFailure when a numeric field is not a decimal.
    """
    parts = line.split("\t")
    if len(parts) != FIELD_COUNT:
        raise MalformedRow(line, f"expected {FIELD_COUNT} fields, got {len(parts)}")
    if any(part == "" for part in parts):
        raise MalformedRow(line, "empty field")

    name = parts[0]
    values = {
        field: _parse_unsigned(line, field, value)
        for field, value in zip(FIELD_NAMES, parts[1:])
    }

    # Allocation is only ever zero for leaf devices, while free can be zero
    # for a full pool. A pool or vdev with nothing allocated is indistinguishable.
    if values["allocated"] == 0:
        capacity, available = None, None
    else:
        capacity, available = values["allocated"], values["free"]

    return IoStatRecord(
        name=name,
        capacity=capacity,
        available=available,
        read_ops=values["read_ops"],
        write_ops=values["write_ops"],
        read_bandwidth=values["read_bandwidth"],
        write_bandwidth=values["write_bandwidth"],
    )


def parse_iostat_output(output: str) -> List[IoStatRecord]:
    """Parses the whole output, preserving row order and dropping malformed rows."""
    records = []
    for line in output.split("\n"):
        line = line.rstrip("\r")
        try:
            records.append(parse_row(line))
        except MalformedRow as e:
            if line:
                logger.debug(f"Dropping row: {e}")
    return records
