"""Example SimpleJSON datasource served with FastAPI.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /          - health check, used by the dashboard when testing the datasource
    /search    - list of targets
    /query     - timeseries ("timeserie") and table ("table") queries
    /annotations - one annotation per region restock
    /tag-keys, /tag-values - ad hoc filter keys and values
    /metrics   - query metrics in Prometheus text format
"""

import logging
import random
from datetime import UTC, datetime, timedelta

from fastapi import FastAPI

from datasourcepy.adapters.frameworks.fastapi import create_datasource_router
from datasourcepy.adapters.storage.in_memory import InMemoryMetricsStorage
from datasourcepy.core.dataset import Dataset
from datasourcepy.core.models import (
    Annotation,
    DataPoint,
    QueryArgs,
    TableResponse,
    TimeSeriesResponse,
)

logging.basicConfig(level=logging.INFO)


class OrdersHandler:
    """Serves random daily order counts per region."""

    regions = ["emea", "apac", "amer"]

    def _daily_orders(self) -> Dataset:
        today = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        ds = Dataset()
        # orders arrive unsorted, with several per day and region
        for _ in range(200):
            day = today - timedelta(days=random.randrange(30))
            ds.add(day, random.choice(self.regions), 1.0)
        ds.add_column("total", lambda values: sum(values.values()))
        return ds

    async def query(self, target: str, args: QueryArgs) -> TimeSeriesResponse:
        ds = self._daily_orders()
        ds.filter_by_range(args.range.start, args.range.end)
        ds.accumulate()
        values, _ = ds.get_values("total")
        return TimeSeriesResponse(
            target=target,
            datapoints=[
                DataPoint(timestamp=ts, value=value)
                for ts, value in zip(ds.get_timestamps(), values, strict=True)
            ],
        )

    async def table_query(self, target: str, args: QueryArgs) -> TableResponse:
        ds = self._daily_orders()
        ds.filter_by_range(args.range.start, args.range.end)
        return ds.generate_table_response()

    async def annotations(
        self, name: str, query: str, args: QueryArgs
    ) -> list[Annotation]:
        start = args.range.start or datetime.now(UTC) - timedelta(days=30)
        return [
            Annotation(time=start + timedelta(days=7), title="restock", tags=[region])
            for region in self.regions
            if not query or query == region
        ]

    async def tag_keys(self) -> list[str]:
        return ["region"]

    async def tag_values(self, key: str) -> list[str]:
        return self.regions if key == "region" else []


metrics_storage = InMemoryMetricsStorage()

app = FastAPI(title="Datasource Example")
app.include_router(
    create_datasource_router(
        {"orders": OrdersHandler()},
        metrics_storage=metrics_storage,
        name="orders",
    )
)
