"""HTTP interface for the TXF converter."""
