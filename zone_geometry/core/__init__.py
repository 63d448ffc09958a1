"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Ellipsoids, thresholds and positional-source labels
- exceptions: Custom exception hierarchy
"""
