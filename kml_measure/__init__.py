"""KML Measurement Pipeline.

Parses KML documents into a normalised feature set, classifies each
feature by geometry type, and totals great-circle line lengths per type
for a presentation layer to render as a map and summary tables.
"""

__version__ = "0.1.0"
