"""Metadata block decoding.

A CodeBit carries a small YAML document somewhere near the top of the file,
usually wrapped in a comment appropriate to the language::

    /*
    ---
    name: MySharedCode.cs
    url: https://example.com/raw/MySharedCode.cs
    version: 1.4
    keywords: CodeBit
    ...
    */

Everything outside the ``---`` / ``...`` markers is ignored. The block is a
flat list of ``key: value`` lines decoded into a ``{str: str}`` mapping.
Plain values are taken verbatim up to the end of the line, so
``version: 1.10`` stays ``"1.10"`` and ``keywords: Tools, #CodeBit`` keeps
its ``#CodeBit`` token. Only a line that starts with ``#`` is a comment.
Quoted values are decoded as YAML scalars.
"""

import re
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from codebit_core.errors import MetadataSyntaxError

# The base loader keeps every scalar as a string.
yaml = YAML(typ="base")

BEGIN_MARKER = "---"
END_MARKER = "..."

PROPERTY_RE = re.compile(r"^(?P<key>[^\s#:][^:]*?)\s*:(?:\s+(?P<value>.*))?$")
QUOTES = ("'", '"')
COLLECTION_STARTS = ("[", "{", "- ", "|", ">")


def find_metadata_block(text: str) -> str | None:
    """
    Return the text between the begin and end markers.

    Returns None when the text has no begin marker at all. A begin marker
    without a matching end marker is a syntax error.
    """
    lines = text.splitlines()
    start = None
    for i, line in enumerate(lines):
        if line.rstrip() == BEGIN_MARKER:
            start = i
            break
    if start is None:
        return None

    for j in range(start + 1, len(lines)):
        if lines[j].rstrip() == END_MARKER:
            return "\n".join(lines[start + 1 : j])

    raise MetadataSyntaxError(
        f"metadata block starting on line {start + 1} has no '{END_MARKER}' end marker"
    )


def _decode_value(key: str, raw: str, lineno: int) -> str:
    value = raw.strip()
    if value.startswith(QUOTES):
        try:
            decoded = yaml.load(value)
        except YAMLError as e:
            raise MetadataSyntaxError(f"line {lineno}: bad quoted value for '{key}': {e}") from e
        if not isinstance(decoded, str):
            raise MetadataSyntaxError(f"line {lineno}: bad quoted value for '{key}'")
        return decoded
    if value.startswith(COLLECTION_STARTS) or value == "-":
        raise MetadataSyntaxError(f"line {lineno}: metadata property '{key}' must be a single value")
    return value


def parse_metadata(text: str) -> dict[str, str]:
    """Decode the metadata block in ``text`` into a flat string mapping."""
    block = find_metadata_block(text)
    if block is None:
        return {}

    result: dict[str, str] = {}
    for lineno, line in enumerate(block.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if line[0] in " \t":
            raise MetadataSyntaxError(f"line {lineno}: nested values are not supported")

        match = PROPERTY_RE.match(line.rstrip())
        if match is None:
            raise MetadataSyntaxError(f"line {lineno}: expected 'key: value', got {stripped!r}")

        key = match.group("key")
        if key in result:
            raise MetadataSyntaxError(f"line {lineno}: duplicate metadata property '{key}'")
        result[key] = _decode_value(key, match.group("value") or "", lineno)
    return result


def read_metadata(path: Path) -> dict[str, str]:
    """Read a file and decode its metadata block."""
    # utf-8-sig drops a leading BOM, which would otherwise hide a '---' on line one
    text = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    return parse_metadata(text)
