# ==============================================================================
# DB SERVICE - Resource-Agnostic Data Access
# ==============================================================================
# create / find_one / count / paginate / update_one over a Motor collection.
# Every store failure surfaces as PersistenceError; absence is never an error.
# ==============================================================================

from __future__ import annotations

import functools
import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from resource_api.core.constants import APIConstants, DocumentFields
from resource_api.core.exceptions import PersistenceError
from resource_api.utils.helpers import calculate_offset, page_count, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = Dict[str, Any]
References = Mapping[str, AsyncIOMotorCollection]

LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})
_DESCENDING_WORDS = frozenset({"desc", "descending"})


def _persistence_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Re-raise driver failures as PersistenceError with the driver message."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except PyMongoError as exc:
            logger.error(f"{func.__name__} failed: {exc}")
            raise PersistenceError(str(exc)) from exc

    return wrapper


# ==============================================================================
# ID SERIALIZATION HELPERS
# ==============================================================================

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value


def serialize_document(document: Document) -> Document:
    """
    Convert a stored document into its API shape.

    ``_id`` becomes the string field ``id``; ObjectIds anywhere in the
    document (populated references included) become strings.
    """
    serialized: Document = {}
    for key, value in document.items():
        if key == DocumentFields.MONGO_ID:
            serialized[DocumentFields.ID] = str(value)
        else:
            serialized[key] = _serialize_value(value)
    return serialized


def _to_object_id(value: Any) -> Any:
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    if isinstance(value, list):
        return [_to_object_id(item) for item in value]
    if isinstance(value, dict):
        # operator dictionaries such as {"$in": [...]} or {"$ne": "..."}
        return {operator: _to_object_id(operand) for operator, operand in value.items()}
    return value


def build_query(query: Optional[Mapping[str, Any]]) -> Document:
    """
    Build a MongoDB filter from a client query.

    ``id`` is accepted as an alias of ``_id`` and string identities are
    cast to ObjectId, including inside ``$and``/``$or``/``$nor`` clauses.
    """
    if not query:
        return {}

    mongo_query: Document = {}
    for key, value in query.items():
        if key in (DocumentFields.ID, DocumentFields.MONGO_ID):
            mongo_query[DocumentFields.MONGO_ID] = _to_object_id(value)
        elif key in LOGICAL_OPERATORS and isinstance(value, list):
            mongo_query[key] = [
                build_query(clause) if isinstance(clause, dict) else clause
                for clause in value
            ]
        else:
            mongo_query[key] = value
    return mongo_query


def _field_name(name: str) -> str:
    return DocumentFields.MONGO_ID if name == DocumentFields.ID else name


def _sort_spec(sort: Any) -> List[Tuple[str, int]]:
    """Accept ``"-createdAt name"`` strings or ``{"name": 1}`` mappings."""
    if not sort:
        return []
    if isinstance(sort, str):
        spec = []
        for token in sort.split():
            if token.startswith("-"):
                spec.append((_field_name(token[1:]), DESCENDING))
            else:
                spec.append((_field_name(token.lstrip("+")), ASCENDING))
        return spec
    return [
        (
            _field_name(name),
            DESCENDING if direction == -1 or str(direction).lower() in _DESCENDING_WORDS else ASCENDING,
        )
        for name, direction in sort.items()
    ]


def _projection(select: Any) -> Optional[Dict[str, int]]:
    """Accept ``"a -b"`` strings, ``["a", "b"]`` lists or ``{"a": 1}`` mappings."""
    if not select:
        return None
    if isinstance(select, str):
        select = select.split()
    if isinstance(select, list):
        projection = {}
        for name in select:
            if name.startswith("-"):
                projection[_field_name(name[1:])] = 0
            else:
                projection[_field_name(name)] = 1
        return projection
    return {_field_name(name): int(flag) for name, flag in select.items()}


def _populate_paths(populate: Any) -> List[str]:
    if not populate:
        return []
    if isinstance(populate, str):
        return populate.split()
    return list(populate)


async def _populate(
    documents: List[Document],
    paths: List[str],
    references: Optional[References],
) -> None:
    """Replace reference values by the documents they point to, in place."""
    if not documents or not paths or not references:
        return

    for path in paths:
        target = references.get(path)
        if target is None:
            continue

        keys = {str(doc[path]) for doc in documents if doc.get(path) is not None}
        if not keys:
            continue

        lookup = [ObjectId(key) if ObjectId.is_valid(key) else key for key in keys]
        cursor = target.find({DocumentFields.MONGO_ID: {"$in": lookup}})
        found = {str(ref[DocumentFields.MONGO_ID]): ref for ref in await cursor.to_list(length=None)}

        for doc in documents:
            ref = found.get(str(doc.get(path)))
            if ref is not None:
                doc[path] = ref


# ==============================================================================
# DATA ACCESS OPERATIONS
# ==============================================================================

@_persistence_errors
async def create(
    collection: AsyncIOMotorCollection,
    document: Mapping[str, Any],
    actor_id: Optional[str] = None,
) -> Document:
    """
    Insert one document.

    Args:
        collection: Target collection
        document: Fields to store; any client ``_id``/``id`` is dropped
        actor_id: Authenticated actor, stamped as ``addedBy``

    Returns:
        The stored document including its assigned ``id``

    Raises:
        PersistenceError: On constraint violation or lost connectivity
    """
    now = utc_now()
    data: Document = {
        key: value for key, value in document.items()
        if key not in (DocumentFields.ID, DocumentFields.MONGO_ID)
    }
    if actor_id is not None:
        data[DocumentFields.ADDED_BY] = actor_id
    data.setdefault(DocumentFields.CREATED_AT, now)
    data.setdefault(DocumentFields.UPDATED_AT, now)

    result = await collection.insert_one(data)
    data[DocumentFields.MONGO_ID] = result.inserted_id
    return serialize_document(data)


@_persistence_errors
async def find_one(
    collection: AsyncIOMotorCollection,
    query: Optional[Mapping[str, Any]] = None,
    options: Optional[Mapping[str, Any]] = None,
    references: Optional[References] = None,
) -> Optional[Document]:
    """
    Return the first matching document, or ``None`` when nothing matches.

    Honours the ``select`` and ``populate`` options.
    """
    options = options or {}
    document = await collection.find_one(
        build_query(query),
        _projection(options.get("select")),
    )
    if document is None:
        return None
    await _populate([document], _populate_paths(options.get("populate")), references)
    return serialize_document(document)


@_persistence_errors
async def count(
    collection: AsyncIOMotorCollection,
    query: Optional[Mapping[str, Any]] = None,
) -> int:
    """Number of documents matching ``query``; ``0`` is a normal result."""
    return await collection.count_documents(build_query(query))


@_persistence_errors
async def paginate(
    collection: AsyncIOMotorCollection,
    query: Optional[Mapping[str, Any]] = None,
    options: Optional[Mapping[str, Any]] = None,
    references: Optional[References] = None,
) -> Document:
    """
    Return one page of matching documents.

    Options:
        page: 1-based page index (default 1)
        limit: page size (default 10)
        offset: documents to skip when ``page`` is not given
        pagination: ``False`` returns every match as a single page
        sort, select, populate: see FilterOptions

    Returns:
        ``{"data": [...], "totalRecords": n, "paginator": {...}}``; an
        empty match is ``data=[]`` and ``totalRecords=0``
    """
    options = options or {}
    mongo_query = build_query(query)

    total = await collection.count_documents(mongo_query)
    find_kwargs: Document = {}
    sort = _sort_spec(options.get("sort"))
    if sort:
        find_kwargs["sort"] = sort

    if options.get("pagination") is False:
        limit = max(total, 1)
        page = 1
    else:
        limit = options.get("limit") or APIConstants.DEFAULT_PAGE_SIZE
        if options.get("page") is None and options.get("offset") is not None:
            skip = options["offset"]
            page = skip // limit + 1
        else:
            page = options.get("page") or APIConstants.DEFAULT_PAGE
            skip = calculate_offset(page, limit)
        find_kwargs.update(skip=skip, limit=limit)

    cursor = collection.find(mongo_query, _projection(options.get("select")), **find_kwargs)
    documents = await cursor.to_list(length=None)

    await _populate(documents, _populate_paths(options.get("populate")), references)

    pages = page_count(total, limit)
    has_prev = page > 1
    has_next = page < pages
    return {
        "data": [serialize_document(doc) for doc in documents],
        "totalRecords": total,
        "paginator": {
            "itemCount": total,
            "perPage": limit,
            "pageCount": pages,
            "currentPage": page,
            "slNo": calculate_offset(page, limit) + 1,
            "hasPrevPage": has_prev,
            "hasNextPage": has_next,
            "prev": page - 1 if has_prev else None,
            "next": page + 1 if has_next else None,
        },
    }


@_persistence_errors
async def update_one(
    collection: AsyncIOMotorCollection,
    query: Mapping[str, Any],
    patch: Mapping[str, Any],
    actor_id: Optional[str] = None,
) -> Optional[Document]:
    """
    Apply ``patch`` to the first document matching ``query``.

    A single ``find_one_and_update`` round trip; the match and the write
    are one store-level operation. ``addedBy`` and the identity are never
    part of the ``$set``.

    Returns:
        The updated document, or ``None`` when nothing matched (no write)
    """
    data: Document = {
        key: value for key, value in patch.items()
        if key not in (DocumentFields.ID, DocumentFields.MONGO_ID, DocumentFields.ADDED_BY)
    }
    if actor_id is not None:
        data[DocumentFields.UPDATED_BY] = actor_id
    data[DocumentFields.UPDATED_AT] = utc_now()

    document = await collection.find_one_and_update(
        build_query(query),
        {"$set": data},
        return_document=ReturnDocument.AFTER,
    )
    return serialize_document(document) if document is not None else None
