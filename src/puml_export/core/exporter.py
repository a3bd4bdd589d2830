import logging
from pathlib import Path

import aiofiles
import httpx

from puml_export.core.encoding import encode_plantuml
from puml_export.core.errors import ExportError, IoError, NetworkError
from puml_export.core.export_data import ExportRequest, ExportStage
from puml_export.core.output_path import resolve_output_path

logger = logging.getLogger(__name__)


async def read_diagram(path: Path) -> str:
    try:
        async with aiofiles.open(path, "r", encoding="utf-8", newline="") as f:
            return await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IoError(f"Could not read input file: {e}", path, ExportStage.READ) from e


async def fetch_image(client: httpx.AsyncClient, url: str, path: Path) -> bytes:
    logger.debug(f"Requesting {url}")
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise NetworkError(
            f"Server returned {e.response.status_code} for {url}", path, ExportStage.FETCH
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkError(f"Request to {url} failed: {e}", path, ExportStage.FETCH) from e
    return response.content


async def write_image(path: Path, data: bytes, input_path: Path):
    try:
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
    except OSError as e:
        raise IoError(f"Could not write {path}: {e}", input_path, ExportStage.WRITE) from e


async def export_file(client: httpx.AsyncClient, request: ExportRequest) -> Path:
    """Render one diagram file and write the image next to it.

    Reads the input, encodes it, fetches the image from the server, and
    writes it to the sibling output path. An existing output file is
    truncated; a failed write may leave it empty or incomplete.

    Args:
        client: Shared HTTP client
        request: What to export and where to render it

    Returns:
        Path of the written image

    Raises:
        ExportError: If any stage fails; the error names the input file
    """
    path = request.input_path
    logger.info(f"Processing {path} ...")

    stage = ExportStage.READ
    try:
        text = await read_diagram(path)

        stage = ExportStage.ENCODE
        token = encode_plantuml(text)
        url = request.url_for(token)

        image = await fetch_image(client, url, path)

        stage = ExportStage.RESOLVE_PATH
        output_path = resolve_output_path(path, request.output_format)

        logger.info(f"Writing to {output_path} ...")
        await write_image(output_path, image, path)
    except ExportError as e:
        e.with_context(path, stage)
        logger.error(f"Error while exporting {path}: {e.message}")
        logger.debug("Error traceback:", exc_info=e)
        raise

    logger.debug(f"Wrote {len(image)} bytes to {output_path}")
    return output_path
