"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from app.schemas import DatasetSummaryResponse, PointResponse, RealtimeDataResponse
from models.records import ChartView, Metric
from services.feed import FeedService, build_default_feed
from storage.dataset_source import DatasetLoadError

router = APIRouter()


def get_feed() -> FeedService:
    return build_default_feed()


def _unavailable(exc: DatasetLoadError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(exc),
    )


@router.get(
    "/dataset",
    response_model=DatasetSummaryResponse,
    summary="Summarize the dataset being replayed.",
)
async def get_dataset_summary(
    feed: FeedService = Depends(get_feed),
) -> DatasetSummaryResponse:
    try:
        summary = feed.summary()
    except DatasetLoadError as exc:
        raise _unavailable(exc) from exc
    return DatasetSummaryResponse.from_summary(summary)


@router.get(
    "/points",
    response_model=List[PointResponse],
    summary="Historical chart points at the requested resolution.",
)
async def get_points(
    view: ChartView = Query(ChartView.tick, description="Chart resolution."),
    metric: Metric = Query(Metric.temperature, description="Series to aggregate."),
    feed: FeedService = Depends(get_feed),
) -> List[PointResponse]:
    try:
        points = feed.chart_points(view, metric)
    except DatasetLoadError as exc:
        raise _unavailable(exc) from exc
    return [PointResponse.from_point(point) for point in points]


@router.get(
    "/stream",
    summary="Live replay of the dataset as newline-delimited JSON.",
    response_class=StreamingResponse,
)
async def stream_readings(
    limit: Optional[int] = Query(None, ge=1, description="Stop after this many readings."),
    feed: FeedService = Depends(get_feed),
) -> StreamingResponse:
    try:
        feed.dataset()
    except DatasetLoadError as exc:
        raise _unavailable(exc) from exc

    async def body() -> AsyncIterator[str]:
        async for reading in feed.stream(limit=limit):
            yield RealtimeDataResponse.from_reading(reading).model_dump_json() + "\n"

    return StreamingResponse(body(), media_type="application/x-ndjson")


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
