"""
Feature modules for Activity Stats.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models or pure data models
- schemas.py - Pydantic schemas
- repository.py - Data access (optional)
"""
