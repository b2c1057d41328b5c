"""Entry point: check data source health and optionally run a query file."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from .client import DataSourceWithBackend
from .config import DataSourceSettings, config_from_env
from .contracts import DataQueryRequest
from .transport import create_transport


def main() -> None:
    """Run one health check and, with ``DSQUERY_QUERY_FILE``, one query."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
    datasource_id = int(os.environ.get("DSQUERY_DATASOURCE_ID", "1"))
    query_file = os.environ.get("DSQUERY_QUERY_FILE")
    config = config_from_env()
    logging.info(
        "dsquery starting (log level: %s, datasource: %s, org: %s)",
        log_level,
        datasource_id,
        config.org_id,
    )
    client = DataSourceWithBackend(
        DataSourceSettings(id=datasource_id),
        config,
        transport=create_transport(org_id=config.org_id),
    )

    async def _run() -> None:
        result = await client.test_health()
        logging.info("Health check: %s (%s)", result.status, result.message)
        if query_file:
            request = DataQueryRequest.model_validate_json(
                Path(query_file).read_text()
            )
            rsp = await client.query(request)
            print(rsp.model_dump_json(by_alias=True, indent=2))

    asyncio.run(_run())


if __name__ == "__main__":  # pragma: no cover - manual entry
    main()
