from enum import Enum
from pathlib import Path

from attrs import field, frozen

from puml_export.core.errors import ExportError
from puml_export.core.output_format import OutputFormat


class ExportStage(Enum):
    READ = "read"
    ENCODE = "encode"
    FETCH = "fetch"
    RESOLVE_PATH = "resolve-path"
    WRITE = "write"
    DISPATCH = "dispatch"


@frozen
class ExportRequest:
    input_path: Path = field(converter=Path)
    base_url: str
    output_format: OutputFormat

    def url_for(self, token: str) -> str:
        """Build the server URL that renders `token` in this request's format."""
        return f"{self.base_url.rstrip('/')}/{self.output_format.segment}/{token}"


@frozen
class ExportResult:
    request: ExportRequest
    output_path: Path | None = None
    error: ExportError | None = None
    size: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def input_path(self) -> Path:
        return self.request.input_path
