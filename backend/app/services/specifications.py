"""
Item specification text <-> attribute/value rows, plus catalogue label
normalisation.

Specifications are stored as one text column. Two shapes turn up:

    "Author: Knuth | Publisher = Addison-Wesley | Edition"   (pipe form)
    "Voltage: 5V. Current = 2A; Weight 30 g"                 (legacy form)

Rows are written back as "Attr: Value. Attr: Value".
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

DEFAULT_LIBRARY_ATTRIBUTES = (
    "Author",
    "Publisher",
    "Edition",
    "ISBN",
    "Pages",
    "Publication Year",
    "Language",
    "Binding Type",
)

# Always shown fully upper-cased in location labels
LOCATION_KEYWORDS = frozenset({"library", "rack", "room"})

_LEGACY_SPLIT = re.compile(r"[.\n;]")
_LEGACY_PATTERNS = (
    re.compile(r"([^:]+):\s*(.+)"),
    re.compile(r"([^=]+)=\s*(.+)"),
    re.compile(r"(\w+(?:\s+\w+)*)\s+(.+)"),
)
_WORD = re.compile(r"\w\S*")


@dataclass
class SpecificationRow:
    attribute: str = ""
    value: str = ""

    def is_blank(self) -> bool:
        return not self.attribute.strip() and not self.value.strip()


def parse_specifications(
    text: Optional[str],
    min_rows: int = 0,
    named_rows: int = 4,
) -> List[SpecificationRow]:
    """
    Split specification text into rows.

    With min_rows the result is padded for an editing form: the first
    `named_rows` slots get the default library attribute names, the rest
    are blank.
    """
    rows: List[SpecificationRow] = []
    if text and text.strip():
        if "|" in text:
            rows = _parse_pipe_form(text)
        else:
            rows = _parse_legacy_form(text)
            if not rows:
                rows = [SpecificationRow("Description", text.strip())]

    while len(rows) < min_rows:
        index = len(rows)
        attribute = ""
        if index < named_rows and index < len(DEFAULT_LIBRARY_ATTRIBUTES):
            attribute = DEFAULT_LIBRARY_ATTRIBUTES[index]
        rows.append(SpecificationRow(attribute, ""))
    return rows


def _parse_pipe_form(text: str) -> List[SpecificationRow]:
    rows = []
    for part in (p.strip() for p in text.split("|")):
        if not part:
            continue
        colon = part.find(":")
        equals = part.find("=")
        if colon > 0:
            rows.append(SpecificationRow(part[:colon].strip(), part[colon + 1:].strip()))
        elif equals > 0:
            rows.append(SpecificationRow(part[:equals].strip(), part[equals + 1:].strip()))
        else:
            # attribute named without a value yet
            rows.append(SpecificationRow(part, ""))
    return rows


def _parse_legacy_form(text: str) -> List[SpecificationRow]:
    rows = []
    for line in (l.strip() for l in _LEGACY_SPLIT.split(text)):
        if not line:
            continue
        for pattern in _LEGACY_PATTERNS:
            match = pattern.search(line)
            if match:
                rows.append(SpecificationRow(match.group(1).strip(), match.group(2).strip()))
                break
    return rows


def format_specifications(rows: Iterable[SpecificationRow]) -> str:
    """Drop blank rows and join the rest as "Attr: Value. Attr: Value" """
    return ". ".join(
        f"{row.attribute}: {row.value}" for row in rows if not row.is_blank()
    )


def to_title_case(text: str) -> str:
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def format_location(text: Optional[str]) -> Optional[str]:
    """
    Normalise a shelf label: "library rack 3" -> "LIBRARY RACK 03",
    "lab 2 cupboard" -> "Lab 02 Cupboard".
    """
    if text is None:
        return None

    words = []
    for word in text.split():
        if word.lower() in LOCATION_KEYWORDS:
            words.append(word.upper())
        elif word.isascii() and word.isdigit():
            words.append(word.zfill(2))
        else:
            words.append(word[0].upper() + word[1:].lower())
    return " ".join(words)
