"""Tool classes and the static registry that enables them.

Every tool operation returns a `ToolResponse` envelope and never raises.
"""
