"""
Identifier helpers.

Documents may be keyed by ObjectId (created by the service) or by plain
string slugs (seeded content such as "dsa" or "demo-1"). These helpers
build lookups that work for both.
"""

from typing import Any, Dict, Union

from bson import ObjectId


def to_object_id(value: str) -> Union[ObjectId, str]:
    """Return an ObjectId when the string is a valid one, else the string."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def id_filter(value: str) -> Dict[str, Any]:
    """Build an `_id` filter that matches either representation."""
    converted = to_object_id(value)
    if isinstance(converted, ObjectId):
        return {"_id": {"$in": [converted, value]}}
    return {"_id": value}
