"""sow-presenter command line interface."""
