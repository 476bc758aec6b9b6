from sticktable_exporter.metrics.renderer import (
    Accumulator,
    MetricBlock,
    RenderConfig,
    accumulate,
    build_blocks,
    fold_records,
    render_metrics,
    serialize,
)

__all__ = [
    "Accumulator",
    "MetricBlock",
    "RenderConfig",
    "accumulate",
    "build_blocks",
    "fold_records",
    "render_metrics",
    "serialize",
]
