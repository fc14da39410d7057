from typing import List, Optional


class ZpoolExporterError(Exception):
    pass


class MalformedRow(ZpoolExporterError, ValueError):
    """A diagnostic row with the wrong number of fields or an empty field."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed row ({reason}): {line!r}")


class NumericParseFailure(ZpoolExporterError, ValueError):
    """A field that must be a non-negative decimal integer is not."""

    def __init__(self, line: str, field: str, value: str):
        self.line = line
        self.field = field
        self.value = value
        super().__init__(f"Field '{field}' is not a non-negative integer: {value!r} (row {line!r})")


class ExternalToolFailure(ZpoolExporterError):
    """An external command could not be run, exited non-zero or printed undecodable output."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command or []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class CommandTimeout(ExternalToolFailure):
    pass


class TopologyUnavailable(ExternalToolFailure):
    pass


class ScrapeFailed(ZpoolExporterError):
    """Raised by the exporter driver when a scrape aborts without emitting metrics."""

    def __init__(self, reason: str, cause: Exception):
        self.reason = reason
        self.cause = cause
        super().__init__(f"Scrape failed ({reason}): {cause}")
