"""Build identity alias tables from git mailmap files.

Supports the four mailmap entry forms::

    Proper Name <commit@email>
    <proper@email> <commit@email>
    Proper Name <proper@email> <commit@email>
    Proper Name <proper@email> Commit Name <commit@email>

Malformed lines are skipped and unreadable files are ignored; building an
alias table never fails.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from gitreviewer.attribution.identity import IdentityAliasTable

logger = logging.getLogger(__name__)

# Optional name, <email>, then optionally a second name and <email>
MAILMAP_ENTRY = re.compile(
    r"^(?P<name1>[^<>]*?)\s*<(?P<email1>[^<>]*)>"
    r"(?:\s*(?P<name2>[^<>]*?)\s*<(?P<email2>[^<>]*)>)?\s*$"
)

# Project mailmap locations, relative to the repository root, in load order
PROJECT_MAILMAP_NAMES = (".mailmap", "mailmap")


def parse_mailmap(text: str) -> IdentityAliasTable:
    """Parse mailmap contents into an alias table.

    Args:
        text: Contents of a mailmap file.

    Returns:
        IdentityAliasTable. Later lines override earlier ones.
    """
    table = IdentityAliasTable()

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = re.sub(r"#.*$", "", raw_line).strip()
        if not line:
            continue

        match = MAILMAP_ENTRY.match(line)
        if not match:
            logger.debug(f"Ignoring malformed mailmap line {lineno}: {raw_line!r}")
            continue

        proper_name = match.group("name1").strip()
        proper_email = match.group("email1").strip()
        commit_name = (match.group("name2") or "").strip()
        commit_email = (match.group("email2") or "").strip()

        if match.group("email2") is None:
            # Proper Name <commit@email>
            table.declare_name(proper_email, proper_name)
            continue

        table.add_email_alias(commit_email, proper_email)
        if proper_name:
            table.declare_name(commit_email, proper_name)
            table.declare_name(proper_email, proper_name)
        if commit_name and proper_name:
            table.add_name_alias(commit_name, proper_name)

    return table


def load_mailmap_file(path: Path | str) -> IdentityAliasTable:
    """Read and parse one mailmap file.

    Missing or unreadable files yield an empty table.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        logger.debug(f"No mailmap at {path}")
        return IdentityAliasTable()

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Could not read mailmap {path}: {type(e).__name__}")
        return IdentityAliasTable()

    table = parse_mailmap(text)
    logger.debug(f"Loaded {len(table)} alias(es) from {path}")
    return table


def build_alias_table(paths: Iterable[Path | str | None]) -> IdentityAliasTable:
    """Layer several mailmap files into one table.

    Args:
        paths: Mailmap locations, lowest priority first. None entries are
            skipped so optional locations can be passed through directly.

    Returns:
        Combined IdentityAliasTable; later files override earlier keys.
    """
    table = IdentityAliasTable()
    for path in paths:
        if path is None:
            continue
        table.update(load_mailmap_file(path))
    return table


def default_mailmap_paths(
    repo_root: Path | str,
    global_mailmap: Path | str | None = None,
    extra: Iterable[Path | str] = (),
) -> list[Path]:
    """Mailmap locations for a repository, lowest priority first.

    Order is the global file (git's ``mailmap.file``, else ``~/.mailmap``),
    then the project's ``.mailmap`` and ``mailmap``, then ``extra``.
    """
    root = Path(repo_root)
    paths = [Path(global_mailmap).expanduser() if global_mailmap else Path.home() / ".mailmap"]
    paths.extend(root / name for name in PROJECT_MAILMAP_NAMES)
    paths.extend(Path(p).expanduser() for p in extra)
    return paths


__all__ = [
    "PROJECT_MAILMAP_NAMES",
    "build_alias_table",
    "default_mailmap_paths",
    "load_mailmap_file",
    "parse_mailmap",
]
