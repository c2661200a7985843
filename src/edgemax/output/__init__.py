from __future__ import annotations

from edgemax.output.formatter import OutputFormatter

__all__ = ["OutputFormatter"]
