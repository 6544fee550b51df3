"""
Map configurations.

Each `maps/<id>/map.yaml` at the repo root describes one map: its point catalog
file, start region, zoom limits, search behavior and marker styling.
"""
