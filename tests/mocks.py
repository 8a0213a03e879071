"""Motor collection doubles shared by the service and endpoint tests."""
from unittest.mock import AsyncMock, MagicMock


def make_collection(find_results=None) -> MagicMock:
    """
    Build a Motor collection double.

    Awaitable methods are AsyncMocks; ``find`` stays synchronous and returns
    a cursor whose ``to_list`` yields the next list from ``find_results``
    (the last one repeats).
    """
    collection = MagicMock()
    for name in (
        "find_one",
        "insert_one",
        "update_one",
        "find_one_and_update",
        "delete_one",
        "delete_many",
        "count_documents",
    ):
        setattr(collection, name, AsyncMock())

    results = find_results or [[]]
    cursors = []
    for result in results:
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=result)
        cursors.append(cursor)
    collection.find.side_effect = cursors + [cursors[-1]] * 10
    return collection


def make_db(**collections) -> MagicMock:
    """Build a database double that returns the given collections by name."""
    names = {"goals", "action_steps", "completed_dates"} | set(collections)
    table = {name: collections.get(name) or make_collection() for name in names}
    db = MagicMock()
    db.__getitem__.side_effect = lambda key: table[key]
    db.collections = table
    return db
