"""ObjectId parsing helpers."""
from bson import ObjectId
from bson.errors import InvalidId


def parse_object_id(value: str, label: str = "document") -> ObjectId:
    """
    Convert a string ID from a URL into an ObjectId.

    Args:
        value: String form of the ID
        label: Entity name used in the error message

    Returns:
        ObjectId

    Raises:
        ValueError: If the ID is not a valid ObjectId

    Examples:
        >>> parse_object_id("65a1b2c3d4e5f6a7b8c9d0e1")
        ObjectId('65a1b2c3d4e5f6a7b8c9d0e1')
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValueError(f"Invalid {label} ID format")
