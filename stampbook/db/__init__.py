from stampbook.db.database import get_session, init_db
from stampbook.db.operations import (
    delete_value,
    deserialize_cards,
    get_value,
    load_cards,
    put_value,
    save_cards,
    serialize_cards,
)

__all__ = [
    "delete_value",
    "deserialize_cards",
    "get_session",
    "get_value",
    "init_db",
    "load_cards",
    "put_value",
    "save_cards",
    "serialize_cards",
]
