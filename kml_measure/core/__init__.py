"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Geometry labels, Earth radius, KML namespaces
- exceptions: Custom exception hierarchy
"""
