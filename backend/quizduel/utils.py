import time


def now_ms() -> int:
    return int(time.time() * 1000)


def clean_name(name: str | None, fallback: str, max_length: int) -> str:
    name = (name or "").strip()
    return (name or fallback)[:max_length]
