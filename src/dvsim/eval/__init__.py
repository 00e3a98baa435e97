"""Run summaries."""
