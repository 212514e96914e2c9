"""
Minimal quoted-CSV parser for the airport reference feed.

Dialect:
- ',' separates fields, '\\n' or '\\r' ends a row
- a double quote toggles "inside quotes" and is not part of the value
- separators and line breaks inside quotes are data
- the first row is a header and is discarded (skip_header=True)

Doubled quotes ("") inside a quoted field are NOT unescaped: each one
toggles the state, so 'a""b' reads as 'ab'. A '\\r\\n' line ending yields
an extra single-empty-field row, which callers filter out by column count.

The stdlib csv module is not used because its quoting rules differ from
this dialect on exactly the cases above.
"""

import re
from typing import List

_SPECIAL = re.compile(r'[",\r\n]')


def parse_csv(text: str, skip_header: bool = True) -> List[List[str]]:
    """
    Split text into rows of string fields.

    Example:
        parse_csv('h\\n"A","B,C",D')  # [['A', 'B,C', 'D']]
    """
    rows: List[List[str]] = []
    current: List[str] = []
    value: List[str] = []
    inside_quotes = False
    header_pending = skip_header
    pos = 0

    # Only the special characters change state; copy the runs in between.
    for match in _SPECIAL.finditer(text):
        start = match.start()
        if start > pos:
            value.append(text[pos:start])
        pos = match.end()
        char = match.group()

        if char == '"':
            inside_quotes = not inside_quotes
        elif inside_quotes:
            value.append(char)
        elif char == ',':
            current.append(''.join(value))
            value = []
        else:
            current.append(''.join(value))
            value = []
            if header_pending:
                header_pending = False
            else:
                rows.append(current)
            current = []

    if pos < len(text):
        value.append(text[pos:])

    if value or current:
        current.append(''.join(value))
        if not header_pending:
            rows.append(current)

    return rows
