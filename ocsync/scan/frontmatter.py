# OCSYNC Front Matter
# Extract name and description from markdown front matter

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from ocsync.exceptions import FrontmatterParseError

MAX_DESCRIPTION_LENGTH = 30

_KEY_PATTERN = re.compile(r"^([A-Za-z0-9_-]+):\s*(.*)$")
_BLOCK_INDICATORS = ("", "|", "|-", "|+", ">", ">-", ">+")


@dataclass
class Frontmatter:
    """Name and description recovered from a front matter block."""

    name: Optional[str] = None
    description: Optional[str] = None


def strip_quotes(value: str) -> str:
    """Remove one pair of surrounding quotes."""
    return re.sub(r"^['\"]|['\"]$", "", value).strip()


def normalize_description(value: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """
    Normalize a description for display.

    Strips quotes, starts at the first letter, collapses whitespace and
    truncates to max_length. Lossy; the full text must be re-read from
    the source.
    """
    trimmed = strip_quotes(value).replace("\r", "").strip()
    match = re.search(r"[A-Za-z]", trimmed)
    if match:
        trimmed = trimmed[match.start():]
    normalized = re.sub(r"\s+", " ", trimmed)
    return normalized[:max_length]


def extract_block(content: str) -> Optional[list[str]]:
    """Return the lines between the leading --- delimiters, or None."""
    lines = content.replace("\r", "").split("\n")
    if not lines or lines[0].strip() != "---":
        return None
    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            return lines[1:index]
    return None


def parse_frontmatter(content: str) -> Frontmatter:
    """
    Parse name and description from markdown content.

    Malformed YAML falls back to a line-based key scan, so a broken block
    never loses the fields that are still readable.
    """
    block = extract_block(content)
    if block is None:
        return Frontmatter()

    try:
        return _parse_yaml(block)
    except FrontmatterParseError:
        return _parse_lines(block)


def read_frontmatter(path: Path) -> Frontmatter:
    """Read front matter from a file; unreadable files yield defaults."""
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return Frontmatter()
    return parse_frontmatter(content)


def _parse_yaml(block: list[str]) -> Frontmatter:
    try:
        data = yaml.safe_load("\n".join(block))
    except yaml.YAMLError as e:
        raise FrontmatterParseError(str(e)) from e

    if data is None:
        return Frontmatter()
    if not isinstance(data, dict):
        raise FrontmatterParseError("Front matter is not a mapping")

    name = data.get("name")
    description = data.get("description")
    return Frontmatter(
        name=str(name).strip() if name is not None and str(name).strip() else None,
        description=str(description).strip() if description is not None else None,
    )


def _parse_lines(block: list[str]) -> Frontmatter:
    """Tolerant key: value scan supporting | and > block scalars."""
    result = Frontmatter()
    index = 0

    while index < len(block):
        match = _KEY_PATTERN.match(block[index])
        if not match:
            index += 1
            continue

        key = match.group(1).lower()
        raw_value = match.group(2).strip()

        if key == "name":
            result.name = strip_quotes(raw_value) or None
            index += 1
        elif key == "description" and raw_value in _BLOCK_INDICATORS:
            value, index = _parse_block_scalar(block, index + 1, folded=raw_value.startswith(">"))
            result.description = value
        elif key == "description":
            result.description = raw_value
            index += 1
        else:
            index += 1

    return result


def _parse_block_scalar(lines: list[str], start: int, *, folded: bool) -> tuple[str, int]:
    collected: list[str] = []
    index = start

    while index < len(lines):
        line = lines[index]
        if not line.strip():
            collected.append("")
            index += 1
            continue
        if not line[:1].isspace():
            break
        collected.append(line.lstrip())
        index += 1

    if folded:
        value = " ".join("\n" if not line else line for line in collected)
        value = re.sub(r"\s+\n\s+", "\n", value).strip()
    else:
        value = "\n".join(collected).strip()

    return value, index
