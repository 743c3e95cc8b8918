"""Base64 VLQ coding for source map v3 `mappings`."""

from typing import List

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_B64_INDEX = {ch: i for i, ch in enumerate(_B64)}

Segment = List[int]


def encode_vlq(value: int) -> str:
    v = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = v & 31
        v >>= 5
        if v:
            digit |= 32
        out.append(_B64[digit])
        if not v:
            return "".join(out)


def decode_vlq(text: str) -> List[int]:
    values: List[int] = []
    shift = 0
    acc = 0
    for ch in text:
        digit = _B64_INDEX[ch]
        acc += (digit & 31) << shift
        if digit & 32:
            shift += 5
            continue
        values.append(-(acc >> 1) if acc & 1 else acc >> 1)
        acc = 0
        shift = 0
    if shift:
        raise ValueError("truncated VLQ sequence")
    return values


def encode_mappings(lines: List[List[Segment]]) -> str:
    """
    Encodes absolute segments [gen_col, source, orig_line, orig_col].

    Columns restart per generated line; the other fields are relative to the
    previous segment anywhere in the map.
    """
    prev_source = prev_line = prev_col = 0
    encoded_lines = []
    for segments in lines:
        prev_gen_col = 0
        parts = []
        for gen_col, source, orig_line, orig_col in segments:
            parts.append(
                encode_vlq(gen_col - prev_gen_col)
                + encode_vlq(source - prev_source)
                + encode_vlq(orig_line - prev_line)
                + encode_vlq(orig_col - prev_col)
            )
            prev_gen_col, prev_source, prev_line, prev_col = gen_col, source, orig_line, orig_col
        encoded_lines.append(",".join(parts))
    return ";".join(encoded_lines)


def decode_mappings(mappings: str) -> List[List[Segment]]:
    """Inverse of encode_mappings; only four-field segments are expected."""
    prev_source = prev_line = prev_col = 0
    lines: List[List[Segment]] = []
    for line in mappings.split(";"):
        gen_col = 0
        segments: List[Segment] = []
        for part in filter(None, line.split(",")):
            fields = decode_vlq(part)
            gen_col += fields[0]
            if len(fields) >= 4:
                prev_source += fields[1]
                prev_line += fields[2]
                prev_col += fields[3]
                segments.append([gen_col, prev_source, prev_line, prev_col])
        lines.append(segments)
    return lines
