"""Command groups for the sow-presenter CLI."""
