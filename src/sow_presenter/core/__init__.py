"""Core text utilities shared across the presenter."""
