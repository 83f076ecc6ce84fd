"""Banner generation for every beatmapset in a round."""

from __future__ import annotations

import re
from pathlib import Path

import anyio
import anyio.to_thread
from anyio.abc import TaskGroup
from loguru import logger

from loved_banners.banner.service import BannerService
from loved_banners.core.models import (
    BannerRequest,
    BannerResult,
    BannerStatus,
    Beatmapset,
)
from loved_banners.exceptions import BannerBatchError, BannerError

_BACKGROUND_RE = re.compile(r"(\d+)\.(?:jpeg|jpg|png)", re.IGNORECASE)


def backgrounds_dir_for_round(base: Path, round_id: int) -> Path:
    return Path(base) / str(round_id)


def load_background_paths(directory: Path, beatmapsets: list[Beatmapset]) -> dict[int, Path]:
    """Map beatmapset IDs to ``<id>.jpg``/``.jpeg``/``.png`` files in ``directory``."""
    paths: dict[int, Path] = {}
    try:
        entries = list(Path(directory).iterdir())
    except OSError:
        logger.warning(f"Background directory {directory}/ not found")
        entries = []

    for entry in entries:
        if not entry.is_file():
            continue
        match = _BACKGROUND_RE.fullmatch(entry.name)
        if match is not None:
            paths[int(match.group(1))] = entry

    for beatmapset in beatmapsets:
        if beatmapset.id not in paths:
            logger.warning(
                f"Missing background image for {beatmapset.title} [#{beatmapset.id}], using default"
            )
    return paths


def build_requests(
    beatmapsets: list[Beatmapset],
    banners_dir: Path,
    title_overrides: dict[int, str] | None = None,
) -> list[BannerRequest]:
    """One request per beatmapset, with title overrides applied."""
    overrides = title_overrides or {}
    return [
        BannerRequest(
            background_path=beatmapset.bg_path,
            output_stem=Path(banners_dir) / str(beatmapset.id),
            title=overrides.get(beatmapset.id, beatmapset.title),
            beatmapset_id=beatmapset.id,
        )
        for beatmapset in beatmapsets
    ]


def _label(request: BannerRequest) -> str:
    if request.beatmapset_id is None:
        return request.title
    return f"{request.title} [#{request.beatmapset_id}]"


async def generate_banners(
    service: BannerService,
    requests: list[BannerRequest],
    *,
    fail_fast: bool = False,
    max_workers: int = 4,
) -> list[BannerResult]:
    """Render all banners on worker threads and return one result per request.

    Any exception from a banner marks only that banner as failed. With
    ``fail_fast`` the first failure cancels banners that have not started and
    raises ``BannerBatchError``; otherwise failures are only reported.
    """
    logger.info("Generating beatmapset banners")
    for parent in {request.output_stem.parent for request in requests}:
        parent.mkdir(parents=True, exist_ok=True)

    results = [BannerResult(request=request) for request in requests]
    limiter = anyio.CapacityLimiter(max_workers)

    async def _run(index: int, tg: TaskGroup) -> None:
        result = results[index]
        try:
            generated = await anyio.to_thread.run_sync(
                service.create, result.request, limiter=limiter
            )
        except Exception as exc:
            result.status = BannerStatus.FAILED
            result.error = exc
            message = f"Failed to create banners for {_label(result.request)}: {exc}"
            if isinstance(exc, BannerError):
                logger.error(message)
            else:
                logger.opt(exception=exc).error(message)
            if fail_fast:
                tg.cancel_scope.cancel()
            return
        result.status = BannerStatus.GENERATED if generated else BannerStatus.CACHED
        logger.info(
            f"{'Created' if generated else 'Using cached'} banners for {_label(result.request)}"
        )

    async with anyio.create_task_group() as tg:
        for index in range(len(results)):
            tg.start_soon(_run, index, tg)

    failed = [result for result in results if result.status == BannerStatus.FAILED]
    if fail_fast and failed:
        raise BannerBatchError(
            f"Banner generation aborted: {_label(failed[0].request)} failed", results
        )
    return results
