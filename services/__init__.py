"""
Service layer for business logic.

This package contains service classes that orchestrate the conversion
pipeline: CSV parsing, normalization, dashboard aggregation and TXF export.
"""
