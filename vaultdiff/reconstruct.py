"""
Rebuilds both sides of a file from its unified diff text.

A unified diff with enough context already interleaves the two complete
documents: context lines belong to both sides, '-' lines only to the old side
and '+' lines only to the new side. Selecting and un-prefixing lines gives
back the full old and new contents without asking git for the blobs.
"""

from typing import List, Tuple
import logging

from vaultdiff.model import DiffHunkLine, LineKind, SyntheticDocument

logger = logging.getLogger(__name__)

NO_NEWLINE_MARKER = '\\'


def split_lines(text: str) -> List[str]:
    """Splits on '\\n' only, keeping terminators. str.splitlines also breaks on \\r, \\f, ..."""
    lines = [line + '\n' for line in text.split('\n')]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


def split_diff(raw: str) -> Tuple[List[str], List[str]]:
    """
    Separates the per-file git header (diff --git, index, mode, ---/+++ lines)
    from the hunk body, which starts at the first '@@' line.
    """
    lines = split_lines(raw)
    for i, line in enumerate(lines):
        if line.startswith('@@'):
            return lines[:i], lines[i:]
    return lines, []


def parse_hunk_lines(body: List[str]) -> List[DiffHunkLine]:
    result: List[DiffHunkLine] = []
    for raw in body:
        if raw.startswith('@@'):
            result.append(DiffHunkLine(LineKind.MARKER, raw))
        elif raw.startswith(NO_NEWLINE_MARKER):
            result.append(DiffHunkLine(LineKind.MARKER, raw))
            # The marker applies to the content line right before it
            for i in range(len(result) - 2, -1, -1):
                previous = result[i]
                if previous.kind != LineKind.MARKER:
                    result[i] = DiffHunkLine(previous.kind, previous.raw.rstrip('\n'))
                    break
        elif raw.startswith('+'):
            result.append(DiffHunkLine(LineKind.ADDED, raw))
        elif raw.startswith('-'):
            result.append(DiffHunkLine(LineKind.REMOVED, raw))
        elif raw.startswith(' '):
            result.append(DiffHunkLine(LineKind.CONTEXT, raw))
        elif raw.strip('\r\n') == '':
            # Some tools trim the space off empty context lines
            result.append(DiffHunkLine(LineKind.CONTEXT, ' ' + raw))
        else:
            logger.debug(f"Treating unexpected diff line as context: {raw!r}")
            result.append(DiffHunkLine(LineKind.CONTEXT, raw))
    return result


def first_content_line(raw: str) -> str:
    """The first non-marker line of the diff body, without its prefix."""
    _, body = split_diff(raw)
    for line in parse_hunk_lines(body):
        if line.kind != LineKind.MARKER:
            return line.content
    return ''


def reconstruct(raw: str) -> Tuple[SyntheticDocument, SyntheticDocument]:
    """
    Returns (old, new) documents for a single file's diff text.

    old = context + removed lines, new = context + added lines, in diff order.
    A side that does not exist (file added or deleted) comes back empty.
    """
    _, body = split_diff(raw)
    hunk_lines = parse_hunk_lines(body)

    old = [line.content for line in hunk_lines if line.kind in (LineKind.CONTEXT, LineKind.REMOVED)]
    new = [line.content for line in hunk_lines if line.kind in (LineKind.CONTEXT, LineKind.ADDED)]

    return SyntheticDocument(old), SyntheticDocument(new)
