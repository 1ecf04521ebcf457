"""Bounded asyncio worker pool driving encode -> submit -> log per image."""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor

from rich.console import Console
from rich.markup import escape

from imgping.api.client import ApiClient, dumps_response
from imgping.io.csv_log import CsvResultLog
from imgping.io.encoder import encode_image
from imgping.io.image_reader import discover_images
from imgping.models.config import RunConfig
from imgping.models.result import PipelineResult, PipelineState, RunSummary
from imgping.utils import display_path, fmt_bytes

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

# What a failure means, keyed by the last state reached before it
_FAILURE_CONTEXT = {
    PipelineState.DISCOVERED: "failed to read image file",
    PipelineState.ENCODED: "API request failed",
    PipelineState.RESPONDED: "failed to write log row",
}


def run(config: RunConfig) -> RunSummary:
    """Run the whole batch to completion. Setup errors raise OSError."""
    return asyncio.run(run_pipeline(config))


async def run_pipeline(config: RunConfig) -> RunSummary:
    if config.concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {config.concurrency}")

    # Setup: both of these are fatal for the run
    log = CsvResultLog(config.output_path)
    try:
        all_images = discover_images(config.images_dir, config.extensions)
        total = len(all_images)
        console.print(f"Found {total:,} images", highlight=False)

        summary = RunSummary(output_path=config.output_path, discovered=total)
        if total == 0:
            console.print("[yellow]No images found.[/yellow]")
            return summary

        queue: asyncio.Queue[str] = asyncio.Queue()
        for path in all_images:
            queue.put_nowait(path)

        workers = min(config.concurrency, total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="imgping-encode") as executor:
            async with ApiClient(config) as client:
                await asyncio.gather(
                    *(_worker(queue, client, log, executor, summary) for _ in range(workers))
                )
    finally:
        log.close()

    _print_summary(summary)
    return summary


async def _worker(
    queue: asyncio.Queue[str],
    client: ApiClient,
    log: CsvResultLog,
    executor: ThreadPoolExecutor,
    summary: RunSummary,
) -> None:
    """Pull paths until the queue is drained. One pipeline at a time per worker."""
    while True:
        try:
            path = queue.get_nowait()
        except asyncio.QueueEmpty:
            return
        result = await process_image(path, client, log, executor)
        summary.results.append(result)
        _report(result)


async def process_image(
    path: str,
    client: ApiClient,
    log: CsvResultLog,
    executor: ThreadPoolExecutor | None = None,
) -> PipelineResult:
    """Take one image from DISCOVERED to LOGGED or FAILED. Never raises."""
    start = time.perf_counter()
    result = PipelineResult(path=path)
    loop = asyncio.get_running_loop()
    try:
        image_b64 = await loop.run_in_executor(executor, encode_image, path)
        result.state = PipelineState.ENCODED
        result.payload_bytes = len(image_b64)

        response = await client.submit(image_b64)
        result.state = PipelineState.RESPONDED

        await log.append(display_path(path), dumps_response(response))
        result.state = PipelineState.LOGGED
    except Exception as e:
        result.failed_at = result.state
        result.state = PipelineState.FAILED
        result.error = f"{_FAILURE_CONTEXT[result.failed_at]}: {_describe(e)}"
    result.elapsed = time.perf_counter() - start
    logger.debug("%s -> %s in %.3fs", display_path(path), result.state.value, result.elapsed)
    return result


def _describe(exc: BaseException) -> str:
    # Lone surrogates from undecodable file names cannot reach a UTF-8 stream
    text = str(exc).encode("utf-8", errors="backslashreplace").decode("utf-8")
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def _report(result: PipelineResult) -> None:
    shown = escape(display_path(result.path))
    if result.ok:
        console.print(f"Successfully processed {shown}", soft_wrap=True)
    else:
        err_console.print(
            f"[red]Error processing[/red] {shown}: {escape(result.error or '')}",
            soft_wrap=True,
        )


def _print_summary(summary: RunSummary) -> None:
    console.print()
    console.print("[bold green]Run complete![/bold green]")
    console.print(f"  Logged: [bold]{summary.logged:,}[/bold]")
    if summary.failed:
        console.print(f"  Failed: [red]{summary.failed:,}[/red]")
    console.print(f"  Encoded payload: {fmt_bytes(summary.payload_bytes)}")
    console.print(f"  Log: {escape(summary.output_path)}", soft_wrap=True)
