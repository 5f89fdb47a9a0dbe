"""Exception hierarchy for memoria.

Messages are written to be shown verbatim to whoever submitted the input,
whether a person at the CLI or an agent calling the retrieval tools.
"""


class MemoriaError(Exception):
    """Base class for all memoria errors."""


class FrontmatterError(MemoriaError, ValueError):
    """A document body carries frontmatter that cannot be accepted."""


class FrontmatterFormatError(FrontmatterError):
    """The frontmatter block is missing or violates the line grammar."""

    def __init__(self, message: str, line: str | None = None):
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)
        self.line = line


class FrontmatterValidationError(FrontmatterError):
    """The block parsed but a field is missing or has the wrong type."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid frontmatter field '{field}': {message}")
        self.field = field


class DocumentLimitError(MemoriaError):
    """The owner already holds the maximum number of documents."""

    def __init__(self, limit: int):
        super().__init__(f"Document limit reached. You can have up to {limit} documents.")
        self.limit = limit


class DocumentTooLargeError(MemoriaError):
    """A document body exceeds the stored size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Document size ({size} bytes) exceeds the {limit // 1024}KB limit.")
        self.size = size
        self.limit = limit


class InvalidHandleError(MemoriaError, ValueError):
    """A document handle is not of the form <slug>-<suffix>."""

    def __init__(self, handle: str):
        super().__init__(
            f"Invalid document handle {handle!r}: expected <slug>-<suffix> (e.g. design-doc-abc123)"
        )
        self.handle = handle


class DocumentNotFound(MemoriaError):
    """No document with the given handle belongs to the caller."""

    def __init__(self, handle: str):
        super().__init__(f"Document not found: {handle}")
        self.handle = handle
