from __future__ import annotations

from typing import Iterable, Iterator, List


class RecipientList:
    """Ordered addresses a notifier sends to. Duplicates are kept."""

    def __init__(self, addresses: Iterable[str] = ()):
        self._addresses: List[str] = list(addresses)

    def __iter__(self) -> Iterator[str]:
        return iter(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)

    def __bool__(self) -> bool:
        return bool(self._addresses)

    def __repr__(self) -> str:
        return f"RecipientList({self._addresses!r})"

    def add(self, address: str) -> None:
        self._addresses.append(address)

    def remove(self, address: str) -> None:
        """Remove the first occurrence of address; ValueError when absent."""
        self._addresses.remove(address)

    def replace(self, addresses: Iterable[str]) -> None:
        self._addresses = list(addresses)

    def clear(self) -> None:
        self._addresses = []

    def snapshot(self) -> List[str]:
        return list(self._addresses)
