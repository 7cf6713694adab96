"""Exceptions raised by the route inspection pipeline.

Every error names the stage that failed so a caller can report
"<stage> failed: <reason>" without inspecting the exception type.
"""
from typing import Optional


class PostmanError(Exception):
    """Base class for fatal pipeline errors."""

    default_stage = "pipeline"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage or self.default_stage


class ParseError(PostmanError):
    """An edge length (or an input file) could not be parsed."""

    default_stage = "build"


class GraphInconsistency(PostmanError):
    """The graph references nodes that do not exist, or breaks the handshake lemma."""

    default_stage = "shortest-paths"


class StallError(PostmanError):
    """The Munkres state machine went through a full cycle without changing state."""

    default_stage = "munkres"

    def __init__(self, message: str, row_covered: int, column_covered: int):
        super().__init__(
            f"{message} (row_covered_count: {row_covered}, col_covered_count: {column_covered})"
        )
        self.row_covered = row_covered
        self.column_covered = column_covered
