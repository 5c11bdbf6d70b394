"""Small helpers shared across layers: log formatting and reply text."""
