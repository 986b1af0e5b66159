"""
messenger package

Text-menu console client for a PostgreSQL-backed messenger: accounts,
contact and block lists, group and private chats, chat messages.

Layers:
- models: SQLAlchemy tables + pydantic read models
- repositories: queries per aggregate
- services: use cases and permission checks
- cli: console view and menus
- main: entry point
"""

__version__ = "0.1.0"
