class IndexerError(RuntimeError):
    """Base class for indexer failures."""


class ExtractionError(IndexerError):
    """Raised when a checkpoint is malformed (missing digest, bad sequence number).

    Indicates upstream corruption. Not retriable.
    """


class CommitError(IndexerError):
    """Raised when a batch could not be written to the store.

    Uniqueness conflicts on tx_digest never raise; everything else does.
    Recommitting the same batch is safe.
    """
