"""Domain models for ggo."""
