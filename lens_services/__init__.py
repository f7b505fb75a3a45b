"""Service package: orchestration, engine, document I/O and UI helpers."""
