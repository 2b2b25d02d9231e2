"""Parsing and editing of OpenSSH client config files."""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple


_KEYWORD = re.compile(r"^\s*(\S+?)(?:\s*=\s*|\s+)(.*?)\s*$")


@dataclass
class HostEntry:
    """A ``Host`` block with the fields used for key setup."""
    alias: str
    hostname: Optional[str] = None
    user: Optional[str] = None
    identity_file: Optional[str] = None

    @property
    def complete(self) -> bool:
        """Whether the block has everything needed to install a key."""
        return bool(self.hostname and self.user and self.identity_file)


def _split(line: str) -> Optional[Tuple[str, str]]:
    if not line.strip() or line.lstrip().startswith("#"):
        return None
    match = _KEYWORD.match(line)
    if not match:
        return line.strip().lower(), ""
    return match.group(1).lower(), match.group(2)


def _patterns(value: str) -> List[str]:
    return value.split()


def parse_hosts(text: str) -> List[HostEntry]:
    """Return the ``Host`` blocks of a config file, in file order.

    A block listing several patterns yields one entry per pattern.
    """
    entries: List[HostEntry] = []
    current: List[HostEntry] = []
    for line in text.splitlines():
        parsed = _split(line)
        if parsed is None:
            continue
        keyword, value = parsed
        if keyword == "host":
            current = [HostEntry(alias=alias) for alias in _patterns(value)]
            entries.extend(current)
        elif keyword == "match":
            current = []
        elif keyword == "hostname":
            for entry in current:
                entry.hostname = value
        elif keyword == "user":
            for entry in current:
                entry.user = value
        elif keyword == "identityfile":
            for entry in current:
                if entry.identity_file is None:
                    entry.identity_file = value
    return entries


def find_host(text: str, alias: str) -> Optional[HostEntry]:
    """Return the entry for ``alias``, if present."""
    for entry in parse_hosts(text):
        if entry.alias == alias:
            return entry
    return None


def has_host(text: str, alias: str) -> bool:
    return find_host(text, alias) is not None


def render_host(entry: HostEntry) -> str:
    """Render an entry as a ``Host`` block."""
    lines = [f"Host {entry.alias}"]
    if entry.hostname:
        lines.append(f"    HostName {entry.hostname}")
    if entry.user:
        lines.append(f"    User {entry.user}")
    if entry.identity_file:
        lines.append(f"    IdentityFile {entry.identity_file}")
    return "\n".join(lines) + "\n"


def add_host(text: str, entry: HostEntry) -> str:
    """Append a block for ``entry`` unless its alias already exists."""
    if has_host(text, entry.alias):
        return text
    if text and not text.endswith("\n"):
        text += "\n"
    separator = "\n" if text else ""
    return f"{text}{separator}{render_host(entry)}"


def remove_host(text: str, alias: str) -> str:
    """Drop the ``Host`` block whose only pattern is ``alias``.

    The block runs until the next ``Host`` or ``Match`` line.
    """
    kept: List[str] = []
    deleting = False
    for line in text.splitlines(keepends=True):
        parsed = _split(line)
        if parsed is not None and parsed[0] in ("host", "match"):
            deleting = parsed[0] == "host" and _patterns(parsed[1]) == [alias]
            if deleting:
                continue
        if not deleting:
            kept.append(line)
    return "".join(kept)
