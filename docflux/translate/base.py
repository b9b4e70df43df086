"""Abstract translation interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Translator(ABC):
    """Text-in / text-out translation collaborator."""

    name: str = "translator"

    @abstractmethod
    async def translate(self, text: str, target_language: str) -> str:
        """Translate *text* into *target_language* (ISO 639-1 code)."""
        ...

    async def aclose(self) -> None:
        return None


def truncate_for_vendor(text: str, max_chars: int) -> str:
    """Cut *text* to the vendor's accepted length, marking the cut with '...'."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
