import logging
from pathlib import Path

from puml_export.core.errors import PathError
from puml_export.core.output_format import OutputFormat

logger = logging.getLogger(__name__)


def resolve_output_path(input_path: Path, output_format: OutputFormat) -> Path:
    """Compute where the rendered image for `input_path` is written.

    The output lives in the same directory as the input and keeps its stem;
    only the final extension is replaced.

    Args:
        input_path: Path of the diagram source file
        output_format: Format of the rendered image

    Returns:
        Path of the output file

    Raises:
        PathError: If the input has no usable file name
    """
    name = input_path.name
    if not name or name in (".", ".."):
        raise PathError("Input path has no file name", path=input_path)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        raise PathError("Input file name is not valid text", path=input_path) from None

    # pathlib treats ".puml" as a stem without suffix; the whole name is the extension
    if name.startswith(".") and not input_path.suffix:
        raise PathError("Input file name has no stem", path=input_path)

    output_path = input_path.with_name(f"{input_path.stem}.{output_format.extension}")
    logger.debug(f"Output path for {input_path} is {output_path}")
    return output_path
