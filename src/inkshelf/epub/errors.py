# ABOUTME: Exception types raised by the EPUB ingestion and rendering pipeline.
# ABOUTME: Degraded metadata and missing covers are outcomes, not exceptions.


class InvalidArchive(Exception):
    """Raised when a file is not a usable EPUB archive.

    Covers a missing or unparsable container descriptor, a container that
    points at a package document that does not exist, and files that are not
    zip archives at all.
    """


class Aborted(Exception):
    """Raised when chunked processing observes its cancellation signal."""
