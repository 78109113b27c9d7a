"""HTTP and WebSocket service for sow-presenter."""
