"""
Core processing modules for the accounting export to TXF converter.

This package contains:
- categories: Category standardization and TXF code tables
- config: Application configuration and settings
- exceptions: Custom exception classes
- exporters: TXF export
- logger: Logging configuration
- normalize: Raw row normalization
- parsing: CSV parsing
- schema: Pydantic models for transactions and summaries
- summary: Dashboard aggregation
"""
