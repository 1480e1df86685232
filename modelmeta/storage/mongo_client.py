# ==============================================
# MongoRowStore
# ==============================================
#
# PURPOSE:
#   RowStore backed by MongoDB through PyMongo. Each metadata
#   table is a collection of flat documents:
#
#     {_id: ObjectId, <foreign_key>: ..., key: str, type: str, value: str}
#
#   ObjectIds leave this class as strings ("id") and come back
#   in as strings.
#
# CLASS: MongoRowStore
# --------------------
#   Stateful: holds connection to MongoDB.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, user=None, password=None)
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - ensure_indexes(collection_name, foreign_key) -> None
#       Compound unique index on (<foreign_key>, key).
#   - fetch_all / insert / update / delete  (RowStore contract)
#
# ==============================================

from typing import Any, Dict, List, Set, Tuple

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure

from modelmeta.storage.base import RowStore


class MongoRowStore(RowStore):
    def __init__(self, host, port, database, user=None, password=None):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.client = None
        self._indexed: Set[Tuple[str, str]] = set()

    def connect(self):
        # Establish connection to MongoDB.
        try:
            if self.user and self.password:
                uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
            else:
                uri = f"mongodb://{self.host}:{self.port}/{self.database}"
            self.client = PyMongoClient(uri)
            # Test connection
            self.client.admin.command('ping')
            print("Connected to MongoDB successfully.")
        except ConnectionFailure as e:
            print(f"Could not connect to MongoDB: {e}")
            raise
        except OperationFailure as e:
            print(f"Authentication failed: {e}")
            raise

    def disconnect(self):
        if self.client:
            self.client.close()
            print("Disconnected from MongoDB.")
            self.client = None
            self._indexed.clear()

    def _collection(self, collection_name):
        if not self.client:
            raise RuntimeError("Not connected to MongoDB.")
        return self.client[self.database][collection_name]

    def ensure_indexes(self, collection_name, foreign_key):
        if (collection_name, foreign_key) in self._indexed:
            return
        collection = self._collection(collection_name)
        collection.create_index(
            [(foreign_key, ASCENDING), ("key", ASCENDING)],
            unique=True,
            name=f"{foreign_key}_key_unique"
        )
        self._indexed.add((collection_name, foreign_key))
        print(f"Created unique index on ({foreign_key}, key) in '{collection_name}'.")

    def fetch_all(self, table: str, foreign_key: str, owner_id: Any) -> List[Dict[str, Any]]:
        collection = self._collection(table)
        rows = []
        for doc in collection.find({foreign_key: owner_id}).sort("_id", ASCENDING):
            doc["id"] = str(doc.pop("_id"))
            rows.append(doc)
        return rows

    def insert(self, table: str, foreign_key: str, row: Dict[str, Any]) -> str:
        self.ensure_indexes(table, foreign_key)
        collection = self._collection(table)
        document = {k: v for k, v in row.items() if k != "id"}
        # Upsert on the unique pair so a concurrent writer's row is overwritten
        result = collection.find_one_and_update(
            {foreign_key: document[foreign_key], "key": document["key"]},
            {"$set": document},
            upsert=True,
            projection={"_id": True},
            return_document=ReturnDocument.AFTER
        )
        return str(result["_id"])

    def update(self, table: str, row_id: Any, row: Dict[str, Any]) -> bool:
        document = {k: v for k, v in row.items() if k != "id"}
        result = self._collection(table).update_one({"_id": ObjectId(row_id)}, {"$set": document})
        return result.matched_count > 0

    def delete(self, table: str, row_id: Any) -> None:
        self._collection(table).delete_one({"_id": ObjectId(row_id)})
