"""Scaffold Python data types and CRUD helpers from an existing database schema."""

__version__ = "0.1.0"
