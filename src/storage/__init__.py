"""Storage helpers for table-format layers."""
