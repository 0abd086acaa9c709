"""
Wings API Application Package

This is the main application package for the Wings API, a crowd-sourced
chicken wing review service.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas and the canonical review record
- routers/: API route handlers
- services/: Review model (validation, form lifecycle, voting, audit, wire format)
"""

__version__ = "0.1.0"
