"""
View-state core.

Reconciles the map region, the live search query, the derived annotation set and
the label toggle into one presentation. Everything here is synchronous and free
of I/O; the HTTP layer only dispatches events into a `MapSession`.
"""
