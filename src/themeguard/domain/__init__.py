"""Domain layer — rule records, extraction, and the pure checkers.

This layer depends only on stdlib and tinycss2.
It must never import from services, infrastructure, commands, or config.
"""
