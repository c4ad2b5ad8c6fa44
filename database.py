"""
MongoDB access helpers.

Documents are stored with string ids in ``_id``. Pydantic models are written
with ``to_document()`` / ``model_dump(mode="json")`` so dates and enums are
stored as plain strings; read paths validate documents back into models.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel
from pymongo import MongoClient

from app_logger import get_logger
from config import DATABASE_NAME, DATABASE_URL
from schemas import new_id

logger = get_logger(__name__)

# The client connects lazily, so importing this module never blocks.
client = MongoClient(DATABASE_URL, serverSelectionTimeoutMS=5000, uuidRepresentation="standard")
db = client[DATABASE_NAME]


def _prepare(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if hasattr(data, "to_document"):
        return data.to_document()
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    return dict(data)


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    doc = _prepare(data)
    doc.setdefault("_id", new_id())
    db[collection_name].insert_one(doc)
    logger.debug("inserted %s/%s", collection_name, doc["_id"])
    return doc["_id"]


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    sort: Optional[Sequence[Tuple[str, int]]] = None,
) -> List[Dict[str, Any]]:
    cursor = db[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(list(sort))
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
    return db[collection_name].find_one({"_id": doc_id})


def update_document(
    collection_name: str,
    doc_id: str,
    data: Union[BaseModel, Dict[str, Any]],
    expected: Optional[Dict[str, Any]] = None,
) -> bool:
    """Set fields on one document in a single write.

    ``expected`` adds field conditions to the match (e.g. the current status),
    so a concurrent change makes the update match nothing. Returns whether a
    document matched.
    """
    fields = _prepare(data)
    fields.pop("_id", None)
    query = {"_id": doc_id, **(expected or {})}
    result = db[collection_name].update_one(query, {"$set": fields})
    return result.matched_count == 1


def delete_document(collection_name: str, doc_id: str) -> bool:
    result = db[collection_name].delete_one({"_id": doc_id})
    return result.deleted_count == 1
