"""Reporting utilities: metric sinks, manifests, summaries and plots."""

from .artifacts import write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter, draw_network
from .summary import write_summary

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "draw_network", "write_manifest", "write_summary"]
