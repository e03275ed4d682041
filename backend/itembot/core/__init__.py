# itembot/core/__init__.py
"""
Core application modules.
Contains the persistent store and the subsystems with real invariants:
- storage: key/value backing medium (memory, directory)
- db: store handle (load/sanitize/save over one blob) and startup wiring
- bootstrap: self-healing of the admin and demo accounts
- usage: daily quota counters and rollover
- notifications: user and admin badge counts
- activity: bounded newest-first activity log
"""
