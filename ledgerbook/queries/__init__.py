"""Report queries package."""

from ledgerbook.queries.aggregator import ReportAggregator

__all__ = ["ReportAggregator"]
