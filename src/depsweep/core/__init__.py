"""Sweep core: version selection and the per-version sweep pipeline."""
