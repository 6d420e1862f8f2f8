"""Dashboard overview counts across all three record sets."""

from __future__ import annotations

import asyncio
import logging

from waste_reports.common.constants import COLLECTIONS_SOURCE, SCHEDULES_SOURCE, USERS_SOURCE
from waste_reports.common.errors import StoreUnavailable
from waste_reports.common.logging import default_logger, log_event
from waste_reports.pipeline.aggregate import parse_amount
from waste_reports.store.gateway import RecordStoreGateway


async def build_overview(gateway: RecordStoreGateway, logger: logging.Logger | None = None) -> dict:
    logger = logger or default_logger()
    sources = {
        COLLECTIONS_SOURCE: gateway.fetch_collections,
        SCHEDULES_SOURCE: gateway.fetch_schedules,
        USERS_SOURCE: gateway.fetch_users,
    }
    results = await asyncio.gather(
        *(asyncio.to_thread(fetcher) for fetcher in sources.values()),
        return_exceptions=True,
    )

    fetched: dict[str, list] = {}
    failed_sources: list[str] = []
    for source, result in zip(sources, results):
        if isinstance(result, StoreUnavailable):
            failed_sources.append(source)
            fetched[source] = []
            log_event(
                logger,
                f"record set {source} unavailable: {result}",
                level=logging.WARNING,
                stage="overview",
                source=source,
                event="FETCH_FAIL",
                status="error",
                error_code=result.error_code,
            )
        elif isinstance(result, BaseException):
            raise result
        else:
            fetched[source] = result

    return {
        "total_collections": len(fetched[COLLECTIONS_SOURCE]),
        "total_schedules": len(fetched[SCHEDULES_SOURCE]),
        "total_users": len(fetched[USERS_SOURCE]),
        "total_revenue": sum((parse_amount(record.total_cost) for record in fetched[COLLECTIONS_SOURCE]), 0.0),
        "failed_sources": failed_sources,
    }
