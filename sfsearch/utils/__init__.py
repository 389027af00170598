"""Cross-cutting utilities: configuration, logging and platform query helpers."""
