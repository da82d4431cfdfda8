"""Beads (bd) issue tracker payload types."""
