"""Enrichment orchestration."""
