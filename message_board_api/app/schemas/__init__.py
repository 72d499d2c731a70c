"""
Pydantic schema definitions for API payloads.

Schemas are separated from the store's records to decouple API
representation from persistence.
"""
