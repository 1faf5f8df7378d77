"""Routing — pattern compilation and the ordered route table.

Patterns are compiled when a ``Route`` is created, so a route table
either builds completely or fails with ``PatternCompileError``.
"""
