"""FastAPI adapter exposing query handlers as a SimpleJSON datasource."""

import json
import logging
import time
from collections.abc import Mapping

from fastapi import APIRouter, Request, Response

from datasourcepy.core.encoding import (
    PROMETHEUS_CONTENT_TYPE,
    ColumnLengthError,
    encode_annotation,
    encode_metrics,
    encode_responses,
)
from datasourcepy.core.metrics import QueryMetrics
from datasourcepy.core.models import (
    Annotation,
    AnnotationRequest,
    MetricSample,
    QueryRequest,
    TableResponse,
    Target,
    TimeSeriesResponse,
)
from datasourcepy.core.ports import (
    AnnotationsHandler,
    MetricsStoragePort,
    QueryHandler,
    TagsHandler,
)

logger = logging.getLogger(__name__)

TABLE_TYPE = "table"
TIMESERIES_TYPES = frozenset({"timeserie", ""})
ANNOTATIONS_CORS_HEADERS = {
    "Access-Control-Allow-Headers": "accept, content-type",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Origin": "*",
}


class QueryError(Exception):
    """Raised when a target cannot be queried."""


async def _run_target(
    handlers: Mapping[str, QueryHandler],
    target: Target,
    request: QueryRequest,
) -> TableResponse | TimeSeriesResponse:
    handler = handlers.get(target.name)
    if handler is None:
        raise QueryError(f"no handler found for target '{target.name}'")

    try:
        if target.type == TABLE_TYPE:
            return await handler.table_query(target.name, request.args)
        if target.type in TIMESERIES_TYPES:
            return await handler.query(target.name, request.args)
    except NotImplementedError as e:
        kind = "table" if target.type == TABLE_TYPE else "timeseries"
        raise QueryError(
            f"{kind} query not implemented for target '{target.name}'"
        ) from e
    raise QueryError(f"unsupported query type '{target.type}'")


def _capable(handlers: Mapping[str, QueryHandler], port: type) -> list:
    """Return the distinct handlers implementing port, in target order."""
    seen: set[int] = set()
    capable = []
    for target in sorted(handlers):
        handler = handlers[target]
        if id(handler) in seen or not isinstance(handler, port):
            continue
        seen.add(id(handler))
        capable.append(handler)
    return capable


def create_datasource_router(
    handlers: Mapping[str, QueryHandler],
    metrics_storage: MetricsStoragePort | None = None,
    name: str = "simplejson",
) -> APIRouter:
    """Create a FastAPI router with the SimpleJSON datasource endpoints.

    Args:
        handlers: Query handlers, keyed by the target name they serve.
        metrics_storage: Storage adapter receiving query duration and failure
            metrics (optional). Also served on /metrics.
        name: Value of the "app" label on recorded metrics.

    Returns:
        APIRouter with /, /search, /query, /annotations, /tag-keys,
        /tag-values and /metrics endpoints configured.
    """
    router = APIRouter()
    query_metrics = QueryMetrics(name)

    async def record(samples: list[MetricSample]) -> None:
        if metrics_storage is None:
            return
        for sample in samples:
            await metrics_storage.write(sample)

    @router.get("/")
    async def health() -> Response:
        """Report that the datasource is up."""
        return Response(status_code=200)

    @router.post("/search")
    async def search() -> Response:
        """Return the list of supported targets."""
        return Response(
            content=json.dumps(sorted(handlers)),
            media_type="application/json",
        )

    @router.post("/query")
    async def query(request: Request) -> Response:
        """Run every requested target and return their responses."""
        try:
            payload = await request.json()
            parsed = QueryRequest.from_dict(payload)
        except (ValueError, KeyError, TypeError) as e:
            return Response(
                content=f"failed to parse request: {e}",
                status_code=400,
                media_type="text/plain",
            )

        responses: list[TableResponse | TimeSeriesResponse] = []
        for target in parsed.targets:
            start = time.perf_counter()
            try:
                responses.append(await _run_target(handlers, target, parsed))
            except Exception as e:
                logger.warning(
                    "query failed for target %s", target.name, exc_info=True
                )
                await record([query_metrics.failure(target.name, target.type)])
                return Response(
                    content=f"failed to process request: {e}",
                    status_code=500,
                    media_type="text/plain",
                )
            finally:
                elapsed = time.perf_counter() - start
                await record(
                    query_metrics.duration(target.name, target.type, elapsed)
                )

        try:
            body = encode_responses(responses)
        except ColumnLengthError as e:
            logger.error("unable to encode query response: %s", e)
            return Response(
                content=f"failed to create response: {e}",
                status_code=500,
                media_type="text/plain",
            )
        return Response(content=body, media_type="application/json")

    @router.options("/annotations")
    async def annotations_preflight() -> Response:
        """Answer the dashboard's CORS preflight for /annotations."""
        return Response(status_code=200, headers=ANNOTATIONS_CORS_HEADERS)

    @router.post("/annotations")
    async def annotations(request: Request) -> Response:
        """Collect the annotations of every handler that provides them.

        A handler that fails is logged and skipped.
        """
        try:
            parsed = AnnotationRequest.from_dict(await request.json())
        except (ValueError, TypeError) as e:
            return Response(
                content=f"failed to parse request: {e}",
                status_code=400,
                media_type="text/plain",
            )

        found: list[Annotation] = []
        for handler in _capable(handlers, AnnotationsHandler):
            try:
                found.extend(
                    await handler.annotations(
                        parsed.annotation.name, parsed.annotation.query, parsed.args
                    )
                )
            except Exception:
                logger.warning(
                    "annotations failed for %s",
                    parsed.annotation.name,
                    exc_info=True,
                )

        body = []
        for annotation in found:
            annotation.request = parsed.annotation
            body.append(encode_annotation(annotation))
        return Response(
            content=json.dumps(body),
            media_type="application/json",
            headers={"Access-Control-Allow-Origin": "*"},
        )

    @router.post("/tag-keys")
    async def tag_keys() -> Response:
        """Return the keys available for ad hoc filters."""
        keys: list[str] = []
        for handler in _capable(handlers, TagsHandler):
            keys.extend(await handler.tag_keys())
        return Response(
            content=json.dumps([{"type": "string", "text": key} for key in keys]),
            media_type="application/json",
        )

    @router.post("/tag-values")
    async def tag_values(request: Request) -> Response:
        """Return the values available for the requested tag key."""
        try:
            payload = await request.json()
            if not isinstance(payload, dict) or not isinstance(
                payload.get("key"), str
            ):
                raise ValueError("request must be a JSON object with a key")
        except ValueError as e:
            return Response(
                content=f"failed to parse request: {e}",
                status_code=400,
                media_type="text/plain",
            )

        values: list[str] = []
        try:
            for handler in _capable(handlers, TagsHandler):
                values.extend(await handler.tag_values(payload["key"]))
        except Exception as e:
            logger.warning("tag values failed for %s", payload["key"], exc_info=True)
            return Response(
                content=f"failed to process request: {e}",
                status_code=500,
                media_type="text/plain",
            )
        return Response(
            content=json.dumps([{"text": value} for value in values]),
            media_type="application/json",
        )

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Return recorded query metrics in Prometheus text format."""
        if metrics_storage is None:
            samples: list[MetricSample] = []
        else:
            samples = [s async for s in metrics_storage.read()]
        return Response(
            content=encode_metrics(samples),
            media_type=PROMETHEUS_CONTENT_TYPE,
        )

    return router

