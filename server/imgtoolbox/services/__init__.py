"""Service layer: image re-encoding."""
