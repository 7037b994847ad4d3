from __future__ import annotations


class SizeFormatter:
    _units = (
        ("PB", 1024**5),
        ("TB", 1024**4),
        ("GB", 1024**3),
        ("MB", 1024**2),
        ("KB", 1024),
    )

    @classmethod
    def human_bytes(cls, size: int) -> str:
        for unit, scale in cls._units:
            if size >= scale:
                return f"{size / scale:.2f} {unit}"
        return f"{size} B"

    @staticmethod
    def percent_of(size: int, total: int) -> str:
        if total <= 0:
            return "n/a"
        return f"{size / total * 100:.2f}%"
