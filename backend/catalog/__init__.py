"""
Point catalogs.

A catalog is the fixed, ordered list of named water-body points a map shows.
It is loaded once per map configuration and shared read-only by all sessions.
"""
