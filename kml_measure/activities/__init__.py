"""Pipeline activities.

Each activity performs a single unit of work on one uploaded document:
- parse_kml: Translate KML text into a normalised FeatureSet
- measure: Count features per geometry type and total line lengths
"""
