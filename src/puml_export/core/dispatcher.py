"""Concurrent export of many diagram files.

Each input file gets its own asyncio task. All tasks run to completion even
when some of them fail; the first failure (in completion order) is reported
only after every task has finished.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

import httpx

from puml_export.core.errors import ExportError, TaskFailedError
from puml_export.core.export_data import ExportRequest, ExportResult, ExportStage
from puml_export.core.exporter import export_file
from puml_export.core.output_format import OutputFormat
from puml_export.infrastructure.http_client import DEFAULT_TIMEOUT, create_client

logger = logging.getLogger(__name__)


def _result_for_task(task: asyncio.Task, request: ExportRequest) -> ExportResult:
    path = request.input_path
    if task.cancelled():
        error = TaskFailedError("Export task was cancelled", path, ExportStage.DISPATCH)
        return ExportResult(request, error=error)

    exc = task.exception()
    if exc is None:
        output_path = task.result()
        try:
            size = output_path.stat().st_size
        except OSError:
            size = 0
        return ExportResult(request, output_path=output_path, size=size)
    if isinstance(exc, ExportError):
        return ExportResult(request, error=exc)

    logger.error(f"Unexpected error while exporting {path}: {exc}")
    logger.debug("Error traceback:", exc_info=exc)
    error = TaskFailedError(f"Export task crashed: {exc!r}", path, ExportStage.DISPATCH)
    error.__cause__ = exc
    return ExportResult(request, error=error)


async def export_all(
    client: httpx.AsyncClient, requests: Iterable[ExportRequest]
) -> list[ExportResult]:
    """Run one export task per request and wait for all of them.

    Args:
        client: HTTP client shared by all tasks
        requests: One request per input file

    Returns:
        One result per request, in the order the tasks finished
    """
    finished: list[asyncio.Task] = []
    requests_by_task: dict[asyncio.Task, ExportRequest] = {}

    for request in requests:
        task = asyncio.create_task(
            export_file(client, request), name=f"export:{request.input_path}"
        )
        task.add_done_callback(finished.append)
        requests_by_task[task] = request

    if not requests_by_task:
        return []

    logger.debug(f"Started {len(requests_by_task)} export tasks")
    await asyncio.wait(requests_by_task)
    return [_result_for_task(task, requests_by_task[task]) for task in finished]


async def dispatch(
    client: httpx.AsyncClient, requests: Iterable[ExportRequest]
) -> list[ExportResult]:
    """Export all requests concurrently and fail if any export failed.

    Every task is awaited before an error is raised, so output from
    successful exports is always written.

    Raises:
        ExportError: The first failure, in completion order
    """
    results = await export_all(client, requests)
    failures = [result for result in results if not result.ok]
    if failures:
        logger.warning(f"{len(failures)} of {len(results)} exports failed")
        raise failures[0].error
    return results


async def run_export(
    paths: Iterable[Path],
    base_url: str,
    output_format: OutputFormat,
    proxy: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[ExportResult]:
    """Export every file in `paths` through the server at `base_url`.

    The HTTP client is created before any file is touched, so an invalid
    proxy configuration aborts the run without reading or writing files.

    Raises:
        ClientConfigError: If the HTTP client cannot be configured
        ExportError: If exporting any file failed
    """
    client = create_client(proxy=proxy, timeout=timeout)
    async with client:
        requests = [ExportRequest(path, base_url, output_format) for path in paths]
        return await dispatch(client, requests)
