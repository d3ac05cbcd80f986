"""SQLite-backed storage for workspace index documents."""

import json
import logging
import os
import sqlite3
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import numpy as np

from codeseek.config import INDEX_VERSION
from codeseek.models import Chunk, FileEntry, WorkspaceIndex
from codeseek.storage.schema import SCHEMA
from codeseek.utils import project_id

logger = logging.getLogger(__name__)


class InvalidIndexError(ValueError):
    """A persisted document is structurally unusable."""


class IndexStore:
    """Stores one SQLite document per workspace under a cache directory.

    Documents are written to a temporary sibling and moved into place, so
    readers only ever see a complete previous or complete new index.
    """

    SUFFIX = ".sqlite"

    def __init__(self, cache_dir: Path | str):
        self.cache_dir = Path(cache_dir)

    def index_path(self, workspace_path: str) -> Path:
        """Return where the index of a workspace lives."""
        return self.cache_dir / f"{project_id(workspace_path)}{self.SUFFIX}"

    def document_mtime(self, workspace_path: str) -> Optional[int]:
        """Modification time of the persisted document, or None if absent."""
        try:
            return self.index_path(workspace_path).stat().st_mtime_ns
        except OSError:
            return None

    @contextmanager
    def connection(self, path: Path, read_only: bool = False) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        if read_only:
            conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        else:
            conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # Reading

    def load(self, workspace_path: str) -> Optional[WorkspaceIndex]:
        """Read and validate the index of a workspace.

        Returns:
            The index, or None when it is missing, unreadable, of another
            schema version, or structurally malformed
        """
        path = self.index_path(workspace_path)
        if not path.is_file():
            return None

        try:
            with self.connection(path, read_only=True) as conn:
                return self._read_index(conn)
        except (sqlite3.Error, InvalidIndexError) as e:
            logger.warning(f"Discarding unusable index {path}: {e}")
            return None

    def _read_index(self, conn: sqlite3.Connection) -> WorkspaceIndex:
        metadata = {
            row["key"]: row["value"]
            for row in conn.execute("SELECT key, value FROM metadata")
        }
        version = self._int(metadata.get("version"), "version")
        if version != INDEX_VERSION:
            raise InvalidIndexError(f"schema version {version} != {INDEX_VERSION}")
        dimension = self._int(metadata.get("dimension"), "dimension")

        vectors = {
            row["chunk_id"]: row["embedding"]
            for row in conn.execute("SELECT chunk_id, embedding FROM vectors")
        }

        chunks = []
        for row in conn.execute(
            """SELECT id, path, start_line, end_line, language, content, tokens
               FROM chunks ORDER BY position"""
        ):
            tokens = self._json_list(row["tokens"], f"tokens of chunk {row['id']}")
            if not all(isinstance(token, str) for token in tokens):
                raise InvalidIndexError(f"non-string token in chunk {row['id']}")
            blob = vectors.get(row["id"])
            if blob is None or len(blob) != dimension * 4:
                raise InvalidIndexError(f"missing or malformed vector for chunk {row['id']}")
            chunks.append(
                Chunk(
                    id=row["id"],
                    path=row["path"],
                    start_line=row["start_line"],
                    end_line=row["end_line"],
                    language=row["language"],
                    content=row["content"],
                    tokens=tokens,
                    vector=np.frombuffer(blob, dtype=np.float32).copy(),
                )
            )

        files = {}
        for row in conn.execute(
            "SELECT path, size, mtime_ns, chunk_ids FROM files ORDER BY position"
        ):
            if not isinstance(row["size"], int) or not isinstance(row["mtime_ns"], int):
                raise InvalidIndexError(f"non-numeric fingerprint for {row['path']}")
            files[row["path"]] = FileEntry(
                size=row["size"],
                mtime_ns=row["mtime_ns"],
                chunk_ids=self._json_list(row["chunk_ids"], f"chunk ids of {row['path']}"),
            )

        idf = {row["token"]: row["weight"] for row in conn.execute("SELECT token, weight FROM idf")}

        return WorkspaceIndex(
            version=version,
            workspace_path=metadata.get("workspace_path") or "",
            indexed_at=self._int(metadata.get("indexed_at"), "indexed_at"),
            total_files=self._int(metadata.get("total_files"), "total_files"),
            total_chunks=self._int(metadata.get("total_chunks"), "total_chunks"),
            dimension=dimension,
            idf=idf,
            files=files,
            chunks=chunks,
            vectorizer=metadata.get("vectorizer") or "",
        )

    @staticmethod
    def _int(value: Optional[str], name: str) -> int:
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise InvalidIndexError(f"invalid {name}: {value!r}") from e

    @staticmethod
    def _json_list(raw: str, what: str) -> list:
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise InvalidIndexError(f"unparseable {what}") from e
        if not isinstance(value, list):
            raise InvalidIndexError(f"{what} is not a list")
        return value

    # Writing

    def save(self, index: WorkspaceIndex) -> Path:
        """Persist an index, atomically replacing any previous document.

        Returns:
            Path of the written document
        """
        path = self.index_path(index.workspace_path)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=f"{path.name}.", suffix=".tmp")
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            with self.connection(tmp_path) as conn:
                conn.executescript(SCHEMA)
                self._write_index(conn, index)
            os.replace(tmp_path, path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        return path

    def _write_index(self, conn: sqlite3.Connection, index: WorkspaceIndex) -> None:
        conn.executemany(
            "INSERT INTO metadata (key, value) VALUES (?, ?)",
            [
                ("version", str(index.version)),
                ("workspace_path", index.workspace_path),
                ("indexed_at", str(index.indexed_at)),
                ("total_files", str(index.total_files)),
                ("total_chunks", str(index.total_chunks)),
                ("dimension", str(index.dimension)),
                ("vectorizer", index.vectorizer),
            ],
        )
        conn.executemany(
            """INSERT INTO files (path, position, size, mtime_ns, chunk_ids)
               VALUES (?, ?, ?, ?, ?)""",
            [
                (path, position, entry.size, entry.mtime_ns, json.dumps(entry.chunk_ids))
                for position, (path, entry) in enumerate(index.files.items())
            ],
        )
        conn.executemany(
            """INSERT INTO chunks
               (id, position, path, start_line, end_line, language, content, tokens)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (
                    chunk.id,
                    position,
                    chunk.path,
                    chunk.start_line,
                    chunk.end_line,
                    chunk.language,
                    chunk.content,
                    json.dumps(chunk.tokens),
                )
                for position, chunk in enumerate(index.chunks)
            ],
        )
        conn.executemany(
            "INSERT INTO vectors (chunk_id, embedding) VALUES (?, ?)",
            [
                (chunk.id, np.asarray(chunk.vector, dtype=np.float32).tobytes())
                for chunk in index.chunks
            ],
        )
        conn.executemany(
            "INSERT INTO idf (token, weight) VALUES (?, ?)",
            list(index.idf.items()),
        )
