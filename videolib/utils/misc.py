import threading
import uuid
from datetime import datetime, timezone
from time import time_ns

_clock_lock = threading.Lock()
_last_ms = 0


def new_id() -> str:
    return str(uuid.uuid4())

def now_iso() -> str:
    # ISO-8601 UTC with millisecond precision and a "Z" suffix
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def monotonic_ms() -> int:
    """
    Wall-clock milliseconds that never go backwards within the process.
    """
    global _last_ms
    with _clock_lock:
        _last_ms = max(_last_ms, time_ns() // 1_000_000)
        return _last_ms

def format_file_size(size) -> str:
    try:
        value = float(size)
    except (TypeError, ValueError):
        return "Unknown size"
    if value != value or value in (float("inf"), float("-inf")) or value <= 0:
        return "Unknown size"

    units = ["bytes", "KB", "MB", "GB", "TB"]
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1

    decimals = 0 if value >= 10 or index == 0 else 1
    return f"{value:.{decimals}f} {units[index]}"

def display_name(name: str) -> str:
    trimmed = (name or "").strip()
    if not trimmed:
        return "Untitled Video"
    last_dot = trimmed.rfind(".")
    if last_dot <= 0:
        return trimmed
    return trimmed[:last_dot]
