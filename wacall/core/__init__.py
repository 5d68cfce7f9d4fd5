"""Core runtime: configuration, logging, event dispatch and the app factory."""
