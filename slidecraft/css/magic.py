# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/magic.py
from __future__ import annotations

from typing import List, Tuple


class EditableString:
    """
    Position-based edits over an immutable original text.

    All offsets refer to the original string, so several transformers can
    edit one buffer without tracking each other's shifts. Overlapping edits
    are rejected.
    """

    def __init__(self, original: str):
        self.original = original
        self._edits: List[Tuple[int, int, str]] = []
        self._intro = ""
        self._outro = ""

    def __len__(self) -> int:
        return len(str(self))

    def _check(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self.original):
            raise IndexError(f"edit range out of bounds: {start}..{end}")
        for s, e, _ in self._edits:
            if start < e and s < end:
                raise ValueError(f"edit {start}..{end} overlaps {s}..{e}")
            if start == end == s == e:
                raise ValueError(f"duplicate insert at {start}")

    def overwrite(self, start: int, end: int, content: str) -> "EditableString":
        self._check(start, end)
        self._edits.append((start, end, content))
        return self

    def remove(self, start: int, end: int) -> "EditableString":
        return self.overwrite(start, end, "")

    def insert(self, index: int, content: str) -> "EditableString":
        return self.overwrite(index, index, content)

    def prepend(self, content: str) -> "EditableString":
        self._intro = content + self._intro
        return self

    def append(self, content: str) -> "EditableString":
        self._outro += content
        return self

    def has_changed(self) -> bool:
        return bool(self._edits or self._intro or self._outro)

    def slice(self, start: int, end: int) -> str:
        return self.original[start:end]

    def __str__(self) -> str:
        out = [self._intro]
        cursor = 0
        for start, end, content in sorted(self._edits, key=lambda e: (e[0], e[1])):
            out.append(self.original[cursor:start])
            out.append(content)
            cursor = end
        out.append(self.original[cursor:])
        out.append(self._outro)
        return "".join(out)

    def __repr__(self):
        return f"EditableString({str(self)!r})"
