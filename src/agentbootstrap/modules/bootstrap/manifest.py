"""Template manifests and the materializer that writes them."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime for template walks
from typing import TYPE_CHECKING

import structlog

from agentbootstrap.infrastructure.fetchers import FetchError, SourceFetcher
from agentbootstrap.infrastructure.paths import ProjectLayout
from agentbootstrap.modules.bootstrap.errors import MaterializationError
from agentbootstrap.modules.bootstrap.models import (
    EntryStatus,
    ManifestEntry,
    MaterializeResult,
)
from agentbootstrap.modules.bootstrap.reporting import NullReporter, ProgressReporter

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "REMOTE_SKILLS",
    "local_manifest",
    "materialize",
    "remote_manifest",
]

logger = structlog.get_logger()

REMOTE_SKILLS = (
    "design-system.md",
    "supabase-api-patterns.md",
    "gemini-ai-patterns.md",
    "gcloud-patterns.md",
)

# Files users are expected to customize; never clobbered on re-run
PROJECT_INSTRUCTIONS = "CLAUDE.md"
MCP_CONFIG = ".mcp.json"


def remote_manifest() -> list[ManifestEntry]:
    """Files downloaded by ``agentbootstrap bootstrap``."""
    entries = [
        ManifestEntry.same(".claude/.gitignore"),
        ManifestEntry.same(".claude/settings.json"),
        ManifestEntry.same(".claude/settings.local.json"),
        ManifestEntry.same(".claude/agents/code-reviewer.md"),
        ManifestEntry.same(".claude/commands/review.md"),
    ]
    entries.extend(ManifestEntry.same(f".claude/skills/{name}") for name in REMOTE_SKILLS)
    entries.append(ManifestEntry.same(MCP_CONFIG, protected=True))
    entries.append(ManifestEntry.same(PROJECT_INSTRUCTIONS, protected=True))
    return entries


def local_manifest(template_root: Path) -> list[ManifestEntry]:
    """Files copied by ``agentbootstrap init`` from a template tree.

    Every markdown file under ``.claude/skills`` is included, so the skill
    set follows whatever the template tree ships.

    Args:
        template_root: Root of the template tree.
    """
    entries = [
        ManifestEntry.same(".claude/settings.json"),
        ManifestEntry.same(".claude/settings.local.json"),
        ManifestEntry.same(".claude/agents/code-reviewer.md"),
    ]

    skills_dir = template_root / ".claude" / "skills"
    if skills_dir.is_dir():
        for skill in sorted(skills_dir.glob("*.md")):
            entries.append(ManifestEntry.same(f".claude/skills/{skill.name}"))

    entries.append(ManifestEntry.same(PROJECT_INSTRUCTIONS, protected=True))
    return entries


def materialize(
    entries: Sequence[ManifestEntry],
    fetcher: SourceFetcher,
    target: Path,
    *,
    reporter: ProgressReporter | None = None,
) -> MaterializeResult:
    """Write every manifest entry into the target directory, in order.

    Protected entries whose destination exists are skipped. The first
    fetch or write failure aborts the remaining manifest.

    Args:
        entries: Manifest to materialize.
        fetcher: Template source.
        target: Target project directory.
        reporter: Progress reporter.

    Returns:
        MaterializeResult recording each entry's status.

    Raises:
        MaterializationError: If an entry cannot be fetched or written.
    """
    reporter = reporter or NullReporter()
    layout = ProjectLayout(target)
    result = MaterializeResult()

    logger.info("materialize_start", source=fetcher.describe(), entries=len(entries))

    for entry in entries:
        try:
            dest = layout.resolve(entry.dest_path)
        except ValueError as e:
            raise MaterializationError(entry.source_path, e) from e

        if entry.protected and dest.exists():
            logger.debug("manifest_entry_skipped", dest=entry.dest_path)
            result.add(entry, EntryStatus.SKIPPED)
            reporter.entry_skipped(entry)
            continue

        try:
            data = fetcher.fetch(entry.source_path)
        except FetchError as e:
            raise MaterializationError(entry.source_path, e) from e

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
        except OSError as e:
            raise MaterializationError(entry.source_path, e) from e

        logger.debug("manifest_entry_written", dest=entry.dest_path, size=len(data))
        result.add(entry, EntryStatus.CREATED)
        reporter.entry_created(entry)

    logger.info(
        "materialize_complete",
        created=len(result.created),
        skipped=len(result.skipped),
    )
    return result
