"""Persistence: JSON serialization and the local plan store."""
