"""Infrastructure layer: configuration, logging, database plumbing."""
