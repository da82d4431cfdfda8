"""GitHub (gh) payload types and parsing."""
