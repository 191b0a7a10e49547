"""
Assignment subsystem.

Components:
- models.py: data structures (Task, Draft, Priority)
- validation.py: draft checks with field-level messages
- query.py: pure filter/sort pipeline and derived values (categories, stats)
- repository.py: ordered task list backed by a key-value slot
- export.py: CSV export
"""
