"""Row ingestion from newline-delimited JSON."""

from ingest.rows import append_rows, json_lines, load_rows
from ingest.schema_text import parse_schema_text

__all__ = ["append_rows", "json_lines", "load_rows", "parse_schema_text"]
