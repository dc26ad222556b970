"""Ingestion helpers (stream frames -> value updates)."""

from pysignalk.ingestion.delta import build_value_updates, decode_delta, ingest_frame

__all__ = ["build_value_updates", "decode_delta", "ingest_frame"]
