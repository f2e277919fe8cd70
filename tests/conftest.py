import pytest


def _status_output(
    cpu: str = "12.5",
    used_mem: str = "2400",
    total_mem: str = "8000",
    disk: str = "45%",
    uptime: str = " 12:34:56 up 1 day,  3:04,  1 user,  load average: 0.15, 0.10, 0.05",
) -> str:
    """Output of `hostname; uptime; echo; top | grep ^%Cpu; echo; free -m; echo; df -h /; echo`."""
    lines = [
        "web-01",
        uptime,
        "",
        f"%Cpu(s): {cpu} us,  2.0 sy,  0.0 ni, 85.0 id,  0.0 wa,  0.0 hi,  0.5 si,  0.0 st",
        "",
        "               total        used        free      shared  buff/cache   available",
        f"Mem:           {total_mem}        {used_mem}        3000         100        2600        5300",
        "Swap:           2047           0        2047",
        "",
        "Filesystem      Size  Used Avail Use% Mounted on",
        f"/dev/sda1        50G   22G   28G  {disk} /",
        "",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_status_output():
    return _status_output
