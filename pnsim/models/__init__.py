from __future__ import annotations
from .pn_junction import JunctionReport, analyze_junction

__all__ = ["JunctionReport", "analyze_junction"]
