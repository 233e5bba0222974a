"""
Item store.

Responsibilities:
- Own the SQLAlchemy engine/session factory handed to each request.
- Define the users, meals and restaurants tables.
- Create tables and seed the admin user and sample meals on first boot.
- Keep a revisioned list cache that mutations invalidate.
"""
