"""
models/ - Domain Models
=======================
Plain dataclasses for persisted entities and the lightweight reference
types used when a related entity is only partially loaded.
"""
