"""
Destination database layer: declarative base, engine/session factory, models.
"""
