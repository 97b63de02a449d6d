"""Project .gitignore maintenance."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime for file access

import structlog

__all__ = [
    "LOCAL_SETTINGS_COMMENT",
    "LOCAL_SETTINGS_ENTRY",
    "GitignoreError",
    "ensure_gitignore_entry",
]

logger = structlog.get_logger()

LOCAL_SETTINGS_ENTRY = ".claude/settings.local.json"
LOCAL_SETTINGS_COMMENT = "# Claude Code local settings (personal permissions)"


class GitignoreError(Exception):
    """Raised when .gitignore cannot be read or written."""


def _has_entry(lines: list[str], entry: str) -> bool:
    # An existing pattern naming the same file counts, e.g. "settings.local.json"
    basename = entry.rsplit("/", 1)[-1]
    return any(
        basename in line and not line.lstrip().startswith("#") for line in lines
    )


def ensure_gitignore_entry(
    gitignore: Path,
    entry: str = LOCAL_SETTINGS_ENTRY,
    *,
    comment: str = LOCAL_SETTINGS_COMMENT,
) -> bool:
    """Make sure a pattern is listed in a .gitignore file.

    Creates the file when missing. Appends a commented block otherwise,
    keeping the existing bytes and line ending style untouched. Bytes that
    are not UTF-8 are carried through unchanged.

    Args:
        gitignore: Path to the .gitignore file.
        entry: Pattern to add.
        comment: Comment line written above the pattern.

    Returns:
        True if the file was created or modified.

    Raises:
        GitignoreError: If the file cannot be read or written.
    """
    try:
        if gitignore.exists():
            content = gitignore.read_bytes().decode("utf-8", errors="surrogateescape")
            newline = "\r\n" if "\r\n" in content else "\n"
            lines = content.splitlines()

            if _has_entry(lines, entry):
                logger.debug("gitignore_entry_present", path=str(gitignore), entry=entry)
                return False

            if content and not content.endswith(("\n", "\r\n")):
                content += newline
            content += newline.join(["", comment, entry, ""])
        else:
            content = "\n".join([comment, entry, ""])

        gitignore.write_bytes(content.encode("utf-8", errors="surrogateescape"))
    except OSError as e:
        raise GitignoreError(f"Cannot update {gitignore}: {e}") from e

    logger.debug("gitignore_entry_added", path=str(gitignore), entry=entry)
    return True
