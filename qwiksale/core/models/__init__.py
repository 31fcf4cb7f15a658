"""Domain vocabulary and API I/O models."""
