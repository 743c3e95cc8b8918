import bisect
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .sourcemap import Segment, encode_mappings


def _utf16_len(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    content: str


class TextPatch:
    """
    A set of non-overlapping span replacements over an immutable original.

    Edits are always expressed in original-text offsets, so they compose
    without shifting each other. The patched text and its source map are
    both derived from the original plus the edit list.
    """

    def __init__(self, original: str):
        self.original = original
        self._edits: Dict[int, Edit] = {}

    @property
    def edits(self) -> List[Edit]:
        return [self._edits[k] for k in sorted(self._edits)]

    def has_changes(self) -> bool:
        return bool(self._edits)

    def overwrite(self, start: int, end: int, content: str) -> "TextPatch":
        if not 0 <= start < end <= len(self.original):
            raise ValueError(f"Invalid span [{start}, {end}) for text of length {len(self.original)}")
        for edit in self._edits.values():
            if start < edit.end and edit.start < end:
                raise ValueError(
                    f"Span [{start}, {end}) overlaps existing edit [{edit.start}, {edit.end})"
                )
        self._edits[start] = Edit(start, end, content)
        return self

    def remove(self, start: int, end: int) -> "TextPatch":
        return self.overwrite(start, end, "")

    def reset(self, start: int, end: int) -> "TextPatch":
        """Drops every edit lying inside [start, end), restoring the original text there."""
        for key in [k for k, e in self._edits.items() if e.start >= start and e.end <= end]:
            del self._edits[key]
        return self

    def _chunks(self) -> List[Tuple[int, int, Optional[str]]]:
        # (orig_start, orig_end, replacement or None for untouched text)
        chunks: List[Tuple[int, int, Optional[str]]] = []
        pos = 0
        for edit in self.edits:
            if pos < edit.start:
                chunks.append((pos, edit.start, None))
            chunks.append((edit.start, edit.end, edit.content))
            pos = edit.end
        if pos < len(self.original):
            chunks.append((pos, len(self.original), None))
        return chunks

    def to_string(self) -> str:
        return "".join(
            self.original[s:e] if content is None else content
            for s, e, content in self._chunks()
        )

    def __str__(self) -> str:
        return self.to_string()

    def generate_map(
        self,
        source: str,
        file: Optional[str] = None,
        include_content: bool = True,
    ) -> Dict[str, Any]:
        """
        Builds a source map v3 for the patched text.

        Untouched text is mapped at its start and at every line start;
        replacement text maps each of its lines to the start of the span it
        replaced. Removed spans produce no segments. Columns count UTF-16
        code units.
        """
        line_starts = [0]
        for i, ch in enumerate(self.original):
            if ch == "\n":
                line_starts.append(i + 1)

        def locate(offset: int) -> Tuple[int, int]:
            line = bisect.bisect_right(line_starts, offset) - 1
            return line, _utf16_len(self.original[line_starts[line]:offset])

        lines: List[List[Segment]] = [[]]
        gen_col = 0

        for start, end, content in self._chunks():
            if content is None:
                orig_line, orig_col = locate(start)
                lines[-1].append([gen_col, 0, orig_line, orig_col])
                text = self.original[start:end]
                for i, ch in enumerate(text):
                    if ch == "\n":
                        lines.append([])
                        gen_col = 0
                        if start + i + 1 < end:
                            next_line, next_col = locate(start + i + 1)
                            lines[-1].append([0, 0, next_line, next_col])
                    else:
                        gen_col += _utf16_len(ch)
            elif content:
                orig_line, orig_col = locate(start)
                lines[-1].append([gen_col, 0, orig_line, orig_col])
                for ch in content:
                    if ch == "\n":
                        lines.append([[0, 0, orig_line, orig_col]])
                        gen_col = 0
                    else:
                        gen_col += _utf16_len(ch)

        # A later segment at the same generated column supersedes the earlier one.
        for segments in lines:
            deduped = []
            for seg in segments:
                if deduped and deduped[-1][0] == seg[0]:
                    deduped[-1] = seg
                else:
                    deduped.append(seg)
            segments[:] = deduped

        source_map: Dict[str, Any] = {
            "version": 3,
            "sources": [source],
            "names": [],
            "mappings": encode_mappings(lines),
        }
        if file is not None:
            source_map["file"] = file
        if include_content:
            source_map["sourcesContent"] = [self.original]
        return source_map
