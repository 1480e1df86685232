# ==============================================
# Tests for the row stores
# ==============================================
#
# MySQL and MongoDB clients run against unittest.mock doubles of
# their drivers; no database server is needed.
# ==============================================

from unittest.mock import MagicMock, patch

import pymysql
import pytest
from bson import ObjectId
from pymysql.constants import CLIENT

from modelmeta.errors import ConfigError
from modelmeta.storage.memory_store import InMemoryRowStore
from modelmeta.storage.mongo_client import MongoRowStore
from modelmeta.storage.mysql_client import MySQLRowStore


class TestInMemoryRowStore:
    def test_insert_assigns_ids(self):
        store = InMemoryRowStore()
        first = store.insert("t", "model_id", {"model_id": 1, "key": "a", "type": "string", "value": "x"})
        second = store.insert("t", "model_id", {"model_id": 1, "key": "b", "type": "string", "value": "y"})

        assert first != second
        assert [row["key"] for row in store.fetch_all("t", "model_id", 1)] == ["a", "b"]

    def test_insert_same_key_overwrites(self):
        store = InMemoryRowStore()
        first = store.insert("t", "model_id", {"model_id": 1, "key": "a", "type": "string", "value": "x"})
        second = store.insert("t", "model_id", {"model_id": 1, "key": "a", "type": "integer", "value": "5"})

        assert first == second
        assert store.count("t") == 1
        assert store.fetch_all("t", "model_id", 1)[0]["value"] == "5"

    def test_rows_are_copies(self):
        store = InMemoryRowStore()
        store.insert("t", "model_id", {"model_id": 1, "key": "a", "type": "string", "value": "x"})

        store.fetch_all("t", "model_id", 1)[0]["value"] = "changed"
        assert store.fetch_all("t", "model_id", 1)[0]["value"] == "x"

    def test_update_reports_match(self):
        store = InMemoryRowStore()
        row_id = store.insert("t", "model_id", {"model_id": 1, "key": "a", "type": "string", "value": "x"})

        assert store.update("t", row_id, {"value": "y"}) is True
        assert store.update("t", 99, {"key": "a"}) is False
        assert store.count("t") == 1

    def test_delete_missing_row_is_ignored(self):
        InMemoryRowStore().delete("t", 99)

    def test_context_manager(self):
        with InMemoryRowStore() as store:
            assert isinstance(store, InMemoryRowStore)


@pytest.fixture
def mysql_connection():
    with patch("modelmeta.storage.mysql_client.pymysql.connect") as connect:
        connection = MagicMock()
        connect.return_value = connection
        yield connection


@pytest.fixture
def mysql_store(mysql_connection):
    store = MySQLRowStore("localhost", 3306, "root", "root", "modelmeta")
    store.connect()
    mysql_connection.cursor.return_value.execute.reset_mock()
    return store


class TestMySQLRowStore:
    def test_connect_creates_database(self, mysql_connection):
        MySQLRowStore("localhost", 3306, "root", "root", "modelmeta").connect()

        executed = [c.args[0] for c in mysql_connection.cursor.return_value.execute.call_args_list]
        assert executed == ["CREATE DATABASE IF NOT EXISTS modelmeta", "USE modelmeta"]

    def test_connect_counts_matched_rows(self):
        with patch("modelmeta.storage.mysql_client.pymysql.connect") as connect:
            MySQLRowStore("localhost", 3306, "root", "root", "modelmeta").connect()

        assert connect.call_args.kwargs["client_flag"] == CLIENT.FOUND_ROWS

    def test_not_connected(self):
        store = MySQLRowStore("localhost", 3306, "root", "root", "modelmeta")
        with pytest.raises(RuntimeError):
            store.delete("metadata", 1)

    def test_rejects_bad_identifiers(self, mysql_store):
        with pytest.raises(ConfigError):
            mysql_store.fetch_all("metadata; DROP TABLE x", "model_id", 1)

    def test_insert_creates_table_once_and_upserts(self, mysql_store, mysql_connection):
        cursor = mysql_connection.cursor.return_value
        cursor.lastrowid = 11
        row = {"model_id": 5, "key": "color", "type": "string", "value": "red"}

        assert mysql_store.insert("metadata", "model_id", row) == 11
        mysql_store.insert("metadata", "model_id", row)

        statements = [c.args[0] for c in cursor.execute.call_args_list]
        assert sum(s.startswith("CREATE TABLE IF NOT EXISTS metadata") for s in statements) == 1
        insert_call = cursor.execute.call_args_list[1]
        assert "ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)" in insert_call.args[0]
        assert insert_call.args[1] == ("5", "color", "string", "red")
        mysql_connection.commit.assert_called()

    def test_failed_write_rolls_back(self, mysql_store, mysql_connection):
        cursor = mysql_connection.cursor.return_value
        cursor.execute.side_effect = pymysql.OperationalError(2013, "Lost connection")

        with pytest.raises(pymysql.MySQLError):
            mysql_store.delete("metadata", 3)
        mysql_connection.rollback.assert_called_once()
        cursor.close.assert_called()

    def test_update_quotes_columns(self, mysql_store, mysql_connection):
        cursor = mysql_connection.cursor.return_value
        cursor.rowcount = 1
        assert mysql_store.update("metadata", 4, {"model_id": 5, "key": "n", "type": "integer", "value": "2"})

        query, params = cursor.execute.call_args.args
        assert query == "UPDATE metadata SET `model_id` = %s, `key` = %s, `type` = %s, `value` = %s WHERE id = %s"
        assert params == (5, "n", "integer", "2", 4)

    def test_update_without_matching_row(self, mysql_store, mysql_connection):
        mysql_connection.cursor.return_value.rowcount = 0

        assert mysql_store.update("metadata", 4, {"value": "2"}) is False
        mysql_connection.commit.assert_called()

    def test_fetch_all_uses_dict_cursor(self, mysql_store, mysql_connection):
        cursor = mysql_connection.cursor.return_value
        cursor.fetchall.return_value = [{"id": 1, "model_id": "5", "key": "a", "type": "string", "value": "x"}]

        rows = mysql_store.fetch_all("metadata", "model_id", 5)

        assert rows[0]["key"] == "a"
        mysql_connection.cursor.assert_any_call(pymysql.cursors.DictCursor)
        assert cursor.execute.call_args.args[1] == ("5",)


@pytest.fixture
def mongo_client():
    with patch("modelmeta.storage.mongo_client.PyMongoClient") as client_cls:
        client = MagicMock()
        client_cls.return_value = client
        yield client


@pytest.fixture
def mongo_store(mongo_client):
    store = MongoRowStore("localhost", 27017, "modelmeta")
    store.connect()
    return store


class TestMongoRowStore:
    def test_connect_pings(self, mongo_client):
        MongoRowStore("localhost", 27017, "modelmeta").connect()
        mongo_client.admin.command.assert_called_once_with("ping")

    def test_not_connected(self):
        with pytest.raises(RuntimeError):
            MongoRowStore("localhost", 27017, "modelmeta").fetch_all("metadata", "model_id", 1)

    def test_insert_upserts_on_key_pair(self, mongo_store, mongo_client):
        collection = mongo_client["modelmeta"]["metadata"]
        oid = ObjectId()
        collection.find_one_and_update.return_value = {"_id": oid}

        row_id = mongo_store.insert("metadata", "model_id", {"model_id": 5, "key": "a", "type": "string", "value": "x"})

        assert row_id == str(oid)
        filter_doc, update_doc = collection.find_one_and_update.call_args.args
        assert filter_doc == {"model_id": 5, "key": "a"}
        assert update_doc == {"$set": {"model_id": 5, "key": "a", "type": "string", "value": "x"}}
        assert collection.find_one_and_update.call_args.kwargs["upsert"] is True
        collection.create_index.assert_called_once()

    def test_fetch_all_exposes_string_ids(self, mongo_store, mongo_client):
        collection = mongo_client["modelmeta"]["metadata"]
        oid = ObjectId()
        collection.find.return_value.sort.return_value = [
            {"_id": oid, "model_id": 5, "key": "a", "type": "string", "value": "x"}
        ]

        rows = mongo_store.fetch_all("metadata", "model_id", 5)

        assert rows == [{"id": str(oid), "model_id": 5, "key": "a", "type": "string", "value": "x"}]
        collection.find.assert_called_once_with({"model_id": 5})

    def test_update_and_delete_by_object_id(self, mongo_store, mongo_client):
        collection = mongo_client["modelmeta"]["metadata"]
        oid = ObjectId()

        collection.update_one.return_value.matched_count = 1
        assert mongo_store.update("metadata", str(oid), {"id": str(oid), "value": "y"}) is True
        mongo_store.delete("metadata", str(oid))

        collection.update_one.assert_called_once_with({"_id": oid}, {"$set": {"value": "y"}})
        collection.delete_one.assert_called_once_with({"_id": oid})

    def test_update_without_matching_document(self, mongo_store, mongo_client):
        collection = mongo_client["modelmeta"]["metadata"]
        collection.update_one.return_value.matched_count = 0

        assert mongo_store.update("metadata", str(ObjectId()), {"value": "y"}) is False
