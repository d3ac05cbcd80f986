"""Database schema for workspace index documents."""

SCHEMA = """
-- Metadata table: version, workspace path, timestamps and counts
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

-- Files table: fingerprints and the ordered chunk ids of each file
CREATE TABLE IF NOT EXISTS files (
    path TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    size INTEGER,
    mtime_ns INTEGER,
    chunk_ids TEXT NOT NULL    -- JSON array
);

-- Chunks table: line-range excerpts in ranking order
CREATE TABLE IF NOT EXISTS chunks (
    id TEXT PRIMARY KEY,
    position INTEGER NOT NULL UNIQUE,
    path TEXT NOT NULL,
    start_line INTEGER NOT NULL,
    end_line INTEGER NOT NULL,
    language TEXT NOT NULL,
    content TEXT NOT NULL,
    tokens TEXT NOT NULL       -- JSON array
);

-- Vectors table: float32 unit vectors
CREATE TABLE IF NOT EXISTS vectors (
    chunk_id TEXT PRIMARY KEY,
    embedding BLOB NOT NULL,
    FOREIGN KEY (chunk_id) REFERENCES chunks(id)
);

-- IDF table: corpus-wide token weights
CREATE TABLE IF NOT EXISTS idf (
    token TEXT PRIMARY KEY,
    weight REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_chunks_path ON chunks(path);
"""
