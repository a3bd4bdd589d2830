"""Error types raised while exporting diagrams.

Per-file failures derive from `ExportError` and carry the offending path and
the pipeline stage that failed. `ClientConfigError` is raised before any file
is processed and aborts the whole run.
"""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from puml_export.core.export_data import ExportStage


class PumlExportError(Exception):
    """Base class for all errors raised by puml-export."""

    pass


class ClientConfigError(PumlExportError):
    """The HTTP client could not be configured (e.g., malformed proxy URL)."""

    pass


class ExportError(PumlExportError):
    """Export of a single file failed.

    Attributes:
        path: Input file whose export failed (None if not yet known)
        stage: Pipeline stage in which the failure occurred
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        stage: "ExportStage | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.stage = stage

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        if self.stage is None:
            return f"{self.path}: {self.message}"
        return f"{self.path} ({self.stage.value}): {self.message}"

    def with_context(self, path: Path, stage: "ExportStage") -> "ExportError":
        """Attach file and stage information if not already present."""
        if self.path is None:
            self.path = path
        if self.stage is None:
            self.stage = stage
        return self


class EncodingError(ExportError):
    """Diagram text could not be encoded (or a token could not be decoded)."""

    pass


class PathError(ExportError):
    """No output path can be derived from the input path."""

    pass


class IoError(ExportError):
    """Reading the input file or writing the output file failed."""

    pass


class NetworkError(ExportError):
    """The request to the PlantUML server failed."""

    pass


class TaskFailedError(ExportError):
    """The task running an export was cancelled or crashed unexpectedly."""

    pass
