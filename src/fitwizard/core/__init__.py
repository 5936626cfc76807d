"""Pure planning and analysis engine."""
