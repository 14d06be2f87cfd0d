"""Findings, snapshot models, aggregation and orchestration."""
