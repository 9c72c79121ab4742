from __future__ import annotations


class FootnoteRegistry:
    """Destinations referenced by links/images, numbered by first appearance."""

    def __init__(self) -> None:
        self._index: dict[str, int] = {}
        self._order: list[str] = []

    def register(self, destination: str) -> int:
        key = str(destination or "").strip()
        existing = self._index.get(key)
        if existing is not None:
            return existing
        self._order.append(key)
        self._index[key] = len(self._order)
        return self._index[key]

    def index_of(self, destination: str) -> int | None:
        return self._index.get(str(destination or "").strip())

    def entries(self) -> list[tuple[int, str]]:
        return [(i, dest) for i, dest in enumerate(self._order, start=1)]

    def __contains__(self, destination: object) -> bool:
        return isinstance(destination, str) and destination.strip() in self._index

    def __len__(self) -> int:
        return len(self._order)
