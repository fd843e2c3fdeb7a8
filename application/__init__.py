"""
Application layer for the workout sync engine.

This package contains:
- ports/: Abstract interfaces (local store, remote store, exercise lookup)
- sync/: Reconciliation, identity remapping, retry and scheduling services
- context.py: SyncContext threaded through every call
- exceptions.py: Sync error hierarchy
"""
