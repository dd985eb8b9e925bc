"""Pooled async database access for sparrow.

SQL in, rows out. Not an ORM.

Basic usage::

    from sparrow.data import Database

    db = Database({"user": "app", "password": "secret", "database": "shop"})
    rows = await db.query("SELECT * FROM users WHERE id = $1", [42])

Most apps never build a ``Database`` directly: ``app.database(config)``
does it, and handlers call ``await req.db_query(sql, params)``.
"""

from sparrow.data.database import Database
from sparrow.data.errors import DataError, DriverNotInstalledError

__all__ = [
    "DataError",
    "Database",
    "DriverNotInstalledError",
]
