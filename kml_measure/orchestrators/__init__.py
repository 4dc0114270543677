"""Pipeline orchestration.

- pipeline: parse → aggregate for one uploaded document
"""
