"""Core contracts.

Protocols implemented by concrete adapters, so the core depends on
abstractions rather than on httpx or dnspython.
"""
