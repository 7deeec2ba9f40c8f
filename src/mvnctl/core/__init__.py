"""Core orchestration logic for mvnctl (no terminal I/O)."""
