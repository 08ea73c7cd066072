"""Report rendering in text and JSON formats."""

from daily_report.rendering.formatter import render, render_json, render_text

__all__ = ["render", "render_json", "render_text"]
