# scratch_fetch/models.py
"""
Data models for scratch-fetch.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class PageData:
    """Holds the requested URL and the raw body of the response."""

    url: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(slots=True, frozen=True)
class ElfInfo:
    """The parts of an ELF header the static-linking check relies on."""

    elf_class: int
    byte_order: str
    machine: int
    interpreter: str | None

    @property
    def is_static(self) -> bool:
        return self.interpreter is None


@dataclass(slots=True, frozen=True)
class BuildResult:
    """Outcome of a complete build: the static executable and the image built from it."""

    binary: Path
    image: str
    dockerfile: Path
