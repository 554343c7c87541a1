"""Adapters for the outside world: HTTP, DNS, script decoding and export."""
