from typing import List

from pydantic import ValidationError

from fleetwatch.models.host import HostStatusSample

# Fixed line positions in the status command output:
#   1  -> uptime line
#   3  -> top-style CPU line ("%Cpu(s):  3.1 us,  1.0 sy, ...")
#   6  -> free "Mem:" line
#   10 -> df line of the monitored filesystem
_MIN_LINES = 12
_UPTIME_LINE = 1
_CPU_LINE = 3
_MEM_LINE = 6
_DISK_LINE = 10

_MIN_CPU_FIELDS = 8
_MIN_MEM_FIELDS = 7
_MIN_DISK_FIELDS = 5


class MetricParseError(ValueError):
    """The status command output did not have the expected layout."""


def _to_float(token: str, what: str, strip: str = "") -> float:
    try:
        return float(token.strip(strip))
    except ValueError as exc:
        raise MetricParseError(f"invalid {what} value {token!r}") from exc


def _cpu_fields(line: str) -> List[str]:
    if ":" not in line:
        raise MetricParseError("unexpected CPU usage format")
    fields = line.split(":", 1)[1].split()
    if len(fields) < _MIN_CPU_FIELDS:
        raise MetricParseError("unexpected CPU usage fields")
    return fields


def parse_status_output(output: str) -> HostStatusSample:
    """
    Turn the output of the host status command into a HostStatusSample.

    The command is expected to print `uptime`, a top CPU summary, `free` and
    `df` in a fixed order, so every metric is read from a fixed line and
    whitespace-separated column. Raises MetricParseError naming the section
    that did not match.
    """
    lines = output.split("\n")
    if len(lines) < _MIN_LINES:
        raise MetricParseError("unexpected output format")

    uptime = lines[_UPTIME_LINE]

    cpu_fields = _cpu_fields(lines[_CPU_LINE])
    cpu_pct = _to_float(cpu_fields[0], "CPU usage", strip="%,")

    mem_fields = lines[_MEM_LINE].split()
    if len(mem_fields) < _MIN_MEM_FIELDS:
        raise MetricParseError("unexpected memory usage fields")
    total_mem = _to_float(mem_fields[1], "total memory")
    used_mem = _to_float(mem_fields[2], "used memory")
    if total_mem == 0:
        raise MetricParseError(f"invalid total memory value {mem_fields[1]!r}")
    mem_pct = used_mem / total_mem * 100

    disk_fields = lines[_DISK_LINE].split()
    if len(disk_fields) < _MIN_DISK_FIELDS:
        raise MetricParseError("unexpected disk usage fields")
    disk_pct = _to_float(disk_fields[4], "disk usage", strip="%,")

    try:
        return HostStatusSample(
            cpu_pct=cpu_pct,
            mem_pct=mem_pct,
            disk_pct=disk_pct,
            uptime=uptime,
        )
    except ValidationError as exc:
        error = exc.errors()[0]
        raise MetricParseError(f"{error['loc'][0]} out of range: {error['input']}") from exc
