"""Turn/stage processing helpers.

Centralizes authorization + stage validation so every secret-word operation
flows through the same pipeline and reports the same error kinds.
"""
