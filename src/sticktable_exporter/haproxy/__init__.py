"""HAProxy stick-table access: dump parsing and scraping."""

from sticktable_exporter.haproxy.parser import parse_line, parse_lines
from sticktable_exporter.haproxy.scraper import (
    SHOW_TABLES,
    ScrapeResult,
    TableScraper,
    show_table_command,
)

__all__ = [
    "parse_line",
    "parse_lines",
    "SHOW_TABLES",
    "ScrapeResult",
    "TableScraper",
    "show_table_command",
]
