"""Per-source status gatherers."""
