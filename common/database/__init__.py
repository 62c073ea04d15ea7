"""
Database module - Async MongoDB connection using Motor, plus id helpers.

Usage:
    from common.database import MongoDB, id_filter

    mongo = MongoDB()
    await mongo.connect(uri, database_name)

    lesson = await mongo.db["lessons"].find_one(id_filter(lesson_id))
"""

from common.database.mongodb import MongoDB, mask_uri
from common.database.ids import to_object_id, id_filter

__all__ = [
    "MongoDB",
    "mask_uri",
    # Identifier helpers
    "to_object_id",
    "id_filter",
]
