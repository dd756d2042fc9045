# ABOUTME: SQL DDL statements for the inkshelf library database schema.
# ABOUTME: One row per imported EPUB volume, keyed by a caller-assigned item id.

SCHEMA_V1 = """
-- Imported volumes
CREATE TABLE volumes (
    item_id       TEXT PRIMARY KEY,
    series        TEXT NOT NULL,
    volume_number INTEGER NOT NULL DEFAULT 1,
    title         TEXT NOT NULL,
    creator       TEXT,
    publisher     TEXT,
    language      TEXT,
    identifier    TEXT,
    description   TEXT,
    cover_path    TEXT,
    source_path   TEXT NOT NULL,
    file_hash     TEXT NOT NULL,
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE UNIQUE INDEX idx_volumes_file_hash ON volumes(file_hash);
CREATE INDEX idx_volumes_series ON volumes(series, volume_number);
CREATE INDEX idx_volumes_source_path ON volumes(source_path);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
