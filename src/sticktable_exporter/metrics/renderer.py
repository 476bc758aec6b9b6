"""
Render scraped stick tables as Prometheus text exposition.

Rendering is a fold over every (table, record) pair. The accumulator
collects the connected/blocked totals and the per-record sample lines,
which are then laid out as a fixed sequence of metric blocks:

1. connected_ips            total keyed records
2. blocked_ips              total records whose blocking counter is > 0
3. connected_ip_gpc         blocking counter of every record carrying it
4. http_request_rate_per_ip request rate of every record carrying it
5. blocked_ip               blocking counter of blocked records only

The HELP/TYPE text of these blocks is kept byte-for-byte compatible with
existing dashboards, including the ``blocked_ip`` HELP name on the
``blocked_ips`` summary and the second ``blocked_ip`` header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sticktable_exporter.haproxy.scraper import Record, ScrapeResult, TableScraper

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class RenderConfig:
    """Which record fields to export, and the optional instance label."""

    blocking_field: str = "gpc0"
    request_rate_field: str = "http_req_rate(10000)"
    instance: str = ""


@dataclass(frozen=True)
class Accumulator:
    connected: int = 0
    blocked: int = 0
    connected_lines: tuple[str, ...] = ()
    request_rate_lines: tuple[str, ...] = ()
    blocked_lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricBlock:
    help_name: str
    help_text: str
    type_name: str
    metric_type: str
    samples: tuple[str, ...] = ()

    def render(self) -> str:
        lines = [
            f"# HELP {self.help_name} {self.help_text}",
            f"# TYPE {self.type_name} {self.metric_type}",
            *self.samples,
        ]
        return "".join(f"{line}\n" for line in lines)


def parse_int32(value: str) -> int | None:
    """Parse a base-10 signed 32-bit integer, None if it is not one."""
    if not _INT_RE.fullmatch(value):
        return None
    number = int(value)
    if number < _INT32_MIN or number > _INT32_MAX:
        return None
    return number


def record_labels(table: str, key: str, config: RenderConfig) -> str:
    labels = f'frontend="{table}",ip="{key}"'
    if config.instance:
        labels += f',instance="{config.instance}"'
    return labels


def summary_labels(config: RenderConfig) -> str:
    if config.instance:
        return f'{{instance="{config.instance}"}}'
    return ""


def accumulate(acc: Accumulator, table: str, record: Record, config: RenderConfig) -> Accumulator:
    """Fold one record into the accumulator. Records without a key are skipped."""
    if "key" not in record:
        return acc

    labels = record_labels(table, record["key"], config)
    connected_lines = acc.connected_lines
    blocked_lines = acc.blocked_lines
    request_rate_lines = acc.request_rate_lines
    blocked = acc.blocked

    if config.blocking_field in record:
        value = record[config.blocking_field]
        connected_lines += (f"connected_ip_gpc{{{labels}}} {value}",)
        counter = parse_int32(value)
        if counter is not None and counter > 0:
            blocked += 1
            blocked_lines += (f"blocked_ip{{{labels}}} {value}",)

    if config.request_rate_field in record:
        value = record[config.request_rate_field]
        request_rate_lines += (f"http_request_rate_per_ip{{{labels}}} {value}",)

    return replace(
        acc,
        connected=acc.connected + 1,
        blocked=blocked,
        connected_lines=connected_lines,
        request_rate_lines=request_rate_lines,
        blocked_lines=blocked_lines,
    )


def fold_records(scrape_result: ScrapeResult, config: RenderConfig) -> Accumulator:
    acc = Accumulator()
    for table, records in scrape_result.items():
        for record in records.values():
            acc = accumulate(acc, table, record, config)
    return acc


def build_blocks(acc: Accumulator, config: RenderConfig) -> list[MetricBlock]:
    """Lay out the accumulated samples in the fixed exposition order."""
    summary = summary_labels(config)
    return [
        MetricBlock(
            "connected_ips",
            "Amount of Connected IPs",
            "connected_ips",
            "untyped",
            (f"connected_ips{summary} {acc.connected}",),
        ),
        MetricBlock(
            "blocked_ip",
            "Amount of currently blocked IPs",
            "blocked_ips",
            "untyped",
            (f"blocked_ips{summary} {acc.blocked}",),
        ),
        MetricBlock(
            "connected_ip_gpc",
            "currently connected_ip gpc_counter",
            "connected_ip_gpc",
            "gauge",
            acc.connected_lines,
        ),
        MetricBlock(
            "http_request_rate_per_ip",
            "currently connected_ip http_request_rate",
            "http_request_rate_per_ip",
            "gauge",
            acc.request_rate_lines,
        ),
        MetricBlock(
            "blocked_ip",
            "Currently blocked IPs",
            "blocked_ip",
            "gauge",
            acc.blocked_lines,
        ),
    ]


def serialize(blocks: list[MetricBlock]) -> str:
    return "".join(block.render() for block in blocks)


async def render_metrics(scraper: TableScraper, config: RenderConfig) -> str:
    """
    Run one scrape cycle and render it.

    Errors from the scraper propagate unchanged; nothing is rendered for
    a failed scrape.
    """
    scrape_result = await scraper.scrape_all()
    acc = fold_records(scrape_result, config)
    return serialize(build_blocks(acc, config))
