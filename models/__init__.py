"""
Models package: exposes the shared DBStorage instance used by the API.
The application factory calls storage.reload() with the configured DATABASE_URL.
"""
from models.db_storage import DBStorage

storage = DBStorage()
