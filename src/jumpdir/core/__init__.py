"""Core infrastructure: configuration, console/logging, errors and search."""
