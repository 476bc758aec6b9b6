from __future__ import annotations

from typing import Protocol

import structlog

from sticktable_exporter.core.errors import ExporterError, ScrapeError
from sticktable_exporter.haproxy.parser import parse_lines

logger = structlog.get_logger()

SHOW_TABLES = "show table"

Record = dict[str, str]
TableRecords = dict[str, Record]
ScrapeResult = dict[str, TableRecords]


class CommandExecutor(Protocol):
    async def execute(self, command: str) -> str: ...


def show_table_command(table: str) -> str:
    return f"{SHOW_TABLES} {table}"


class TableScraper:
    """Lists and dumps HAProxy stick tables through the control socket."""

    def __init__(self, client: CommandExecutor) -> None:
        self._client = client

    async def list_tables(self) -> list[str]:
        """
        Return the names of all stick tables, in the order HAProxy lists them.

        Only header lines carry a ``table`` field, so any other line in
        the response is ignored.
        """
        content = await self._client.execute(SHOW_TABLES)
        tables: dict[str, None] = {}
        for fields in parse_lines(content):
            if "table" not in fields:
                continue
            tables[fields["table"]] = None
        return list(tables)

    async def scrape_table(self, table: str) -> TableRecords:
        """Return one table's entries keyed by their ``key`` field. Last entry wins."""
        content = await self._client.execute(show_table_command(table))
        records: TableRecords = {}
        for fields in parse_lines(content):
            if "key" not in fields:
                continue
            records[fields["key"]] = fields
        return records

    async def scrape_all(self) -> ScrapeResult:
        """
        Scrape every table.

        A failure while listing or dumping any table aborts the whole
        scrape; no partial result is returned.
        """
        try:
            tables = await self.list_tables()
        except ExporterError as exc:
            raise ScrapeError("could not fetch tables") from exc

        logger.debug("tables_listed", count=len(tables))

        result: ScrapeResult = {}
        for table in tables:
            try:
                result[table] = await self.scrape_table(table)
            except ExporterError as exc:
                raise ScrapeError(
                    f"could not scrape table {table}", details={"table": table}
                ) from exc
            logger.debug("table_scraped", table=table, records=len(result[table]))
        return result
