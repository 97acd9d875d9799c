"""Core primitives (bounded message log, events, errors) and state-to-text rendering.

Kept free of storage and transport concerns so sessions can be hosted anywhere.
"""
