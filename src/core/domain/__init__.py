"""Domain models and entities.

Pure, strict data structures (Pydantic v2), BRFC identifiers, handle
parsing and the error taxonomy. The domain knows nothing about HTTP, DNS
or the CLI.
"""
