"""
Item Bot store: persistent state, trackers and API for the Item content assistant.
"""
