"""Spreadsheet-style vertex labels: A … Z, AA … AZ, BA, …"""


def base26(i: int) -> str:
    """Encode a non-negative index as a bijective base-26 label (0 → "A", 26 → "AA")."""
    if i < 0:
        raise ValueError(f"Label index must not be negative, got {i}")

    chars = []
    while i >= 0:
        chars.append(chr(ord("A") + i % 26))
        i = i // 26 - 1
    return "".join(reversed(chars))
