"""
Firestore query helpers.

NOTE: firebase_admin still accepts positional where() arguments; the newer
FieldFilter API emits no warning but is not needed for these simple queries.
"""


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply a single where clause to a collection or query.

    Usage:
        query = where_filter(collection, "user_id", "==", "user1")
        query = where_filter(query, "created_at", "<", cutoff)
    """
    return query.where(field_path, op_string, value)


def snapshot_to_dict(snapshot) -> dict:
    """Convert a document snapshot to a dict carrying its id."""
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data
