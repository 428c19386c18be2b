"""Core data structures and models, free of web framework dependencies."""
