# ==============================================================================
# DB SERVICE TESTS
# ==============================================================================
# Tests for the resource-agnostic data access helpers
# ==============================================================================

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from resource_api.core.exceptions import PersistenceError
from resource_api.database import db_service


async def _seed(orders, count: int) -> list:
    created = []
    for index in range(count):
        created.append(await db_service.create(
            orders,
            {"item": f"item-{index}", "quantity": index + 1, "price": 1.0},
            actor_id="actor",
        ))
    return created


class TestBuildQuery:
    """Tests for query translation."""

    def test_id_alias(self):
        oid = ObjectId()
        assert db_service.build_query({"id": str(oid)}) == {"_id": oid}

    def test_operators_and_logical_clauses(self):
        first, second = ObjectId(), ObjectId()
        query = db_service.build_query({
            "$or": [{"id": {"$in": [str(first), str(second)]}}, {"item": "bolt"}],
        })

        assert query == {"$or": [{"_id": {"$in": [first, second]}}, {"item": "bolt"}]}

    def test_empty(self):
        assert db_service.build_query(None) == {}


class TestSerializeDocument:
    """Tests for the API document shape."""

    def test_id_and_nested_object_ids(self):
        oid, ref = ObjectId(), ObjectId()
        document = db_service.serialize_document({"_id": oid, "owner": {"_id": ref}, "tags": [ref]})

        assert document == {"id": str(oid), "owner": {"id": str(ref)}, "tags": [str(ref)]}


class TestCreate:
    """Tests for insertion."""

    @pytest.mark.asyncio
    async def test_create_stamps_actor_and_timestamps(self, orders):
        created = await db_service.create(orders, {"item": "bolt", "addedBy": "intruder"}, actor_id="actor")

        assert ObjectId.is_valid(created["id"])
        assert created["addedBy"] == "actor"
        assert "createdAt" in created
        assert "updatedAt" in created

        stored = await orders.find_one({"_id": ObjectId(created["id"])})
        assert stored["item"] == "bolt"
        assert stored["addedBy"] == "actor"

    @pytest.mark.asyncio
    async def test_client_identity_ignored(self, orders):
        forged = str(ObjectId())
        created = await db_service.create(orders, {"id": forged, "item": "bolt"})

        assert created["id"] != forged

    @pytest.mark.asyncio
    async def test_driver_errors_become_persistence_errors(self, orders, monkeypatch):
        async def fail(*args, **kwargs):
            raise DuplicateKeyError("E11000 duplicate key error")

        monkeypatch.setattr(orders, "insert_one", fail)

        with pytest.raises(PersistenceError) as exc_info:
            await db_service.create(orders, {"item": "bolt"})

        assert "E11000" in exc_info.value.message


class TestFindOneAndCount:
    """Tests for single lookups and counting."""

    @pytest.mark.asyncio
    async def test_find_one_by_id(self, orders):
        created, _ = await _seed(orders, 2)

        found = await db_service.find_one(orders, {"_id": created["id"]})

        assert found["id"] == created["id"]
        assert found["item"] == "item-0"

    @pytest.mark.asyncio
    async def test_find_one_absent_is_none(self, orders):
        assert await db_service.find_one(orders, {"_id": str(ObjectId())}) is None

    @pytest.mark.asyncio
    async def test_find_one_select(self, orders):
        created, = await _seed(orders, 1)

        found = await db_service.find_one(orders, {"id": created["id"]}, {"select": "item"})

        assert found == {"id": created["id"], "item": "item-0"}

    @pytest.mark.asyncio
    async def test_count(self, orders):
        await _seed(orders, 3)

        assert await db_service.count(orders) == 3
        assert await db_service.count(orders, {"quantity": {"$gte": 2}}) == 2
        assert await db_service.count(orders, {"item": "missing"}) == 0


class TestPaginate:
    """Tests for paging."""

    @pytest.mark.asyncio
    async def test_first_page(self, orders):
        await _seed(orders, 5)

        page = await db_service.paginate(orders, {}, {"page": 1, "limit": 2, "sort": "quantity"})

        assert page["totalRecords"] == 5
        assert [doc["quantity"] for doc in page["data"]] == [1, 2]
        assert page["paginator"] == {
            "itemCount": 5,
            "perPage": 2,
            "pageCount": 3,
            "currentPage": 1,
            "slNo": 1,
            "hasPrevPage": False,
            "hasNextPage": True,
            "prev": None,
            "next": 2,
        }

    @pytest.mark.asyncio
    async def test_last_page_descending(self, orders):
        await _seed(orders, 5)

        page = await db_service.paginate(orders, {}, {"page": 3, "limit": 2, "sort": {"quantity": -1}})

        assert [doc["quantity"] for doc in page["data"]] == [1]
        assert page["paginator"]["hasNextPage"] is False
        assert page["paginator"]["prev"] == 2
        assert page["paginator"]["slNo"] == 5

    @pytest.mark.asyncio
    async def test_offset(self, orders):
        await _seed(orders, 5)

        page = await db_service.paginate(orders, {}, {"offset": 4, "limit": 2, "sort": "quantity"})

        assert [doc["quantity"] for doc in page["data"]] == [5]
        assert page["paginator"]["currentPage"] == 3

    @pytest.mark.asyncio
    async def test_pagination_disabled(self, orders):
        await _seed(orders, 12)

        page = await db_service.paginate(orders, {}, {"pagination": False})

        assert len(page["data"]) == 12
        assert page["paginator"]["pageCount"] == 1

    @pytest.mark.asyncio
    async def test_empty_match(self, orders):
        page = await db_service.paginate(orders, {"item": "missing"})

        assert page["data"] == []
        assert page["totalRecords"] == 0

    @pytest.mark.asyncio
    async def test_populate(self, adapter, orders):
        users = adapter.collection("users")
        user_id = (await users.insert_one({"name": "Ada"})).inserted_id
        await db_service.create(orders, {"item": "bolt"}, actor_id=str(user_id))

        page = await db_service.paginate(
            orders,
            {},
            {"populate": "addedBy"},
            references={"addedBy": users},
        )

        assert page["data"][0]["addedBy"] == {"id": str(user_id), "name": "Ada"}


class TestUpdateOne:
    """Tests for update-by-filter."""

    @pytest.mark.asyncio
    async def test_update_returns_new_document(self, orders):
        created, = await _seed(orders, 1)

        updated = await db_service.update_one(
            orders,
            {"_id": created["id"]},
            {"quantity": 9, "addedBy": "intruder"},
            actor_id="editor",
        )

        assert updated["quantity"] == 9
        assert updated["updatedBy"] == "editor"
        assert updated["addedBy"] == "actor"

    @pytest.mark.asyncio
    async def test_no_match_writes_nothing(self, orders):
        await _seed(orders, 1)

        updated = await db_service.update_one(orders, {"_id": str(ObjectId())}, {"quantity": 9})

        assert updated is None
        assert await orders.count_documents({}) == 1
        assert await orders.count_documents({"quantity": 9}) == 0
