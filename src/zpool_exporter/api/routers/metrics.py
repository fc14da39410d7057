"""API router for the Prometheus scrape endpoint."""

import traceback

from fastapi import APIRouter, HTTPException, Response
from fastapi.logger import logger
from prometheus_client import CONTENT_TYPE_LATEST

from zpool_exporter.api.dtos import ErrorResponse, SuccessResponse, VersionResponse
from zpool_exporter.config.settings import config
from zpool_exporter.exporter import Exporter
from zpool_exporter.metrics.sink import render
from zpool_exporter.zpool.errors import ScrapeFailed

router = APIRouter(tags=["Metrics"])


@router.get(
    "/metrics",
    response_class=Response,
    responses={
        500: {"model": ErrorResponse, "description": "zpool could not be queried"},
        504: {"model": ErrorResponse, "description": "zpool did not answer in time"},
    }
)
def metrics():
    """
    Scrapes every pool and returns the metrics in the Prometheus text format.
    """
    try:
        groups = Exporter(pools=config.pools).scrape()
    except ScrapeFailed as e:
        logger.error(f"Error scraping pools: {e}\n{traceback.format_exc()}")
        status_code = 504 if e.reason == "timeout" else 500
        raise HTTPException(status_code=status_code, detail=str(e))
    return Response(content=render(groups), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", response_model=SuccessResponse)
def health():
    return SuccessResponse()


@router.get("/version", response_model=VersionResponse)
def version():
    from zpool_exporter.version import get_version
    return VersionResponse(version=get_version())
