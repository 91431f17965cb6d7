"""Core package: shared exceptions."""
