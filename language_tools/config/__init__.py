"""Configuration package.

Module split:
    - `settings`: environment-driven endpoints, keys and job limits.
    - `logging_setup`: console and rotating-file logging handlers.
"""
