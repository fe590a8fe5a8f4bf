"""Assessment delivery service."""
