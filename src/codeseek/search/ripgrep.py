"""ripgrep-backed literal search collaborator."""

import asyncio
import hashlib
import logging
import os
import re
import subprocess

from codeseek.models import SearchHit
from codeseek.utils import language_from_path, to_posix

logger = logging.getLogger(__name__)

_MATCH_LINE = re.compile(r"^(.+?):(\d+):(.*)$")
_WHITESPACE = re.compile(r"\s+")

MAX_SNIPPET_CHARS = 320


def rg_score(rank: int) -> float:
    """Synthetic score of the rank-th grep match, decaying from 0.96 to 0.35."""
    return max(0.35, 0.96 - rank * 0.02)


def parse_rg_output(stdout: str, workspace_path: str, limit: int) -> list[SearchHit]:
    """Turn ``path:line:text`` lines into hits, in output order.

    Args:
        stdout: Raw ripgrep output
        workspace_path: Workspace root the search ran in
        limit: Maximum number of hits to return

    Returns:
        Single-line hits with source "rg"
    """
    hits: list[SearchHit] = []

    for line in stdout.splitlines():
        if len(hits) >= limit:
            break
        match = _MATCH_LINE.match(line)
        if not match:
            continue

        raw_path, raw_line, body = match.groups()
        rel_path = to_posix(raw_path)
        line_number = int(raw_line)
        digest = hashlib.sha1(f"rg:{rel_path}:{line_number}:{body}".encode("utf-8"))

        hits.append(
            SearchHit(
                id=digest.hexdigest()[:16],
                source="rg",
                score=rg_score(len(hits)),
                path=rel_path,
                absolute_path=os.path.join(workspace_path, *rel_path.split("/")),
                start_line=line_number,
                end_line=line_number,
                language=language_from_path(rel_path),
                snippet=_WHITESPACE.sub(" ", body).strip()[:MAX_SNIPPET_CHARS],
            )
        )

    return hits


class RipgrepSearcher:
    """Runs ``rg`` in the workspace and parses its matches.

    A missing binary, a timeout or a non-zero exit status (including
    "no matches") all yield an empty list.
    """

    def __init__(self, rg_path: str = "rg", timeout: float = 10.0):
        self.rg_path = rg_path
        self.timeout = timeout

    def command(self, query: str, limit: int) -> list[str]:
        max_count = max(20, limit * 8)
        return [
            self.rg_path,
            "--no-heading",
            "--line-number",
            "--smart-case",
            "--max-count",
            str(max_count),
            "--",
            query,
            ".",
        ]

    async def search(self, workspace_path: str, query: str, limit: int) -> list[SearchHit]:
        """Return at most ``limit`` grep hits for the query."""
        process = None
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(query, limit),
                cwd=workspace_path,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except (OSError, asyncio.TimeoutError) as e:
            if process is not None and process.returncode is None:
                process.kill()
                await process.wait()
            logger.debug(f"ripgrep unavailable for {workspace_path}: {e}")
            return []

        if process.returncode != 0:
            logger.debug(f"ripgrep exited with {process.returncode} for {query!r}")
            return []

        return parse_rg_output(stdout.decode("utf-8", errors="replace"), workspace_path, limit)
