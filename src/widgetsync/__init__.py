"""Journal home-screen widget sync daemon.

Keeps rendered home-screen widgets in step with the journal app's widget
snapshot:
- Debounced refresh when the snapshot file changes
- Daily refresh shortly after local midnight
- Refresh on demand through the control API
"""

__version__ = "1.0.0"
