"""Live presentation: state, broadcast, control plane and display."""
