"""Core package - configuration and shared errors."""
