"""Command-line interface for depsweep."""
