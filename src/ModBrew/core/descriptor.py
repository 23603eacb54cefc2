"""Rewrite ``key="value"`` mod descriptors for a build."""

import re
from typing import Optional

DESCRIPTOR_FILE_NAME = "descriptor.mod"
DEV_SUFFIX = " - Dev Version"

_KEY_VALUE = re.compile(r'^\s*([A-Za-z_][\w]*)\s*=\s*"([^"]*)"')


def insert_name_suffix(text: str, suffix: str) -> str:
    """Insert ``suffix`` before the closing quote of the first ``name`` line.

    Text without a ``name`` line (or whose ``name`` line has no quote) is
    returned unchanged.
    """
    lines = text.splitlines(keepends=True)
    for i, line in enumerate(lines):
        if not line.strip().lower().startswith("name"):
            continue
        quote = line.rfind('"')
        if quote == -1:
            return text
        lines[i] = line[:quote] + suffix + line[quote:]
        return "".join(lines)
    return text


def append_path(text: str, output_path: str) -> str:
    """Append a ``path="..."`` line pointing at ``output_path``."""
    value = output_path.replace("\\", "/")
    if text and not text.endswith("\n"):
        text += "\n"
    return f'{text}path="{value}"\n'


def rewrite_descriptor(text: str, output_path: str,
                       variant_suffix: Optional[str] = None) -> str:
    """Return ``text`` with the build output path and optional name suffix."""
    text = append_path(text, output_path)
    if variant_suffix:
        text = insert_name_suffix(text, variant_suffix)
    return text


def read_descriptor_value(text: str, key: str) -> Optional[str]:
    """Return the first quoted value assigned to ``key``, if any."""
    for line in text.splitlines():
        match = _KEY_VALUE.match(line)
        if match and match.group(1).lower() == key.lower():
            return match.group(2)
    return None
