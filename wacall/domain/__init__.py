"""Domain layer: interfaces of external collaborators."""
