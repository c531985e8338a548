# tests/conftest.py
import sys
import os

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT_DIR)

import math
from types import SimpleNamespace
from typing import List, Dict, Any

from bson import ObjectId
import pytest
from pymongo.errors import OperationFailure

from bookstore.data import seed_documents


def _matches(doc, q):
    """
    Check a document against a subset of MongoDB filter syntax.

    Supports exact matches and the $gt, $gte, $lt and $lte comparison
    operators. A document missing a compared field never matches a range.
    """
    for k, v in (q or {}).items():
        docv = doc.get(k)
        if isinstance(v, dict):
            if docv is None:
                return False
            if "$gt" in v and not docv > v["$gt"]:
                return False
            if "$gte" in v and not docv >= v["$gte"]:
                return False
            if "$lt" in v and not docv < v["$lt"]:
                return False
            if "$lte" in v and not docv <= v["$lte"]:
                return False
        elif docv != v:
            return False
    return True


def _project(doc, projection):
    if not projection:
        return dict(doc)
    included = [k for k, v in projection.items() if v and k != "_id"]
    keep_id = projection.get("_id", 1)
    if included:
        out = {k: doc[k] for k in included if k in doc}
    else:
        out = {k: v for k, v in doc.items() if projection.get(k, 1)}
    if keep_id and "_id" in doc:
        out["_id"] = doc["_id"]
    elif not keep_id:
        out.pop("_id", None)
    return out


def _sort_docs(docs, keys):
    # stable sorts applied from the least significant key backwards
    for field, direction in reversed(keys):
        docs.sort(key=lambda d: d.get(field), reverse=(direction < 0))
    return docs


def _eval(expr, doc):
    """Evaluate the aggregation expressions used by the pipelines."""
    if isinstance(expr, str) and expr.startswith("$"):
        return doc.get(expr[1:])
    if isinstance(expr, dict):
        op, arg = next(iter(expr.items()))
        if op == "$multiply":
            result = 1
            for a in arg:
                result *= _eval(a, doc)
            return result
        if op == "$divide":
            return _eval(arg[0], doc) / _eval(arg[1], doc)
        if op == "$floor":
            return math.floor(_eval(arg, doc))
        raise NotImplementedError(op)
    return expr


def _group(docs, spec):
    groups = {}
    for d in docs:
        key = _eval(spec["_id"], d)
        groups.setdefault(key, []).append(d)

    out = []
    for key, members in groups.items():
        row = {"_id": key}
        for field, acc in spec.items():
            if field == "_id":
                continue
            op, arg = next(iter(acc.items()))
            values = [_eval(arg, m) for m in members]
            if op == "$sum":
                row[field] = sum(values)
            elif op == "$avg":
                row[field] = sum(values) / len(values)
            else:
                raise NotImplementedError(op)
        out.append(row)
    return out


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]], collection=None, query=None):
        self._docs = list(docs)
        self._skip = 0
        self._limit = None
        self._collection = collection
        self._query = query or {}

    def sort(self, key_or_list, direction=None):
        """
        Sort the documents in the cursor, mirroring Motor's sort() signature.

        Accepts either a single key with a direction or a list of
        (field, direction) tuples; every tuple is honoured in order.

        Returns:
            FakeCursor: The same cursor instance to allow method chaining.
        """
        if isinstance(key_or_list, str):
            keys = [(key_or_list, 1 if direction is None else direction)]
        else:
            keys = list(key_or_list)
        _sort_docs(self._docs, keys)
        return self

    def skip(self, n: int):
        self._skip = n
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    async def to_list(self, length=None):
        """
        Return copies of the documents left after skip() and limit().

        Args:
            length (int, optional): Upper bound on returned documents, as in
                Motor. None returns everything.
        """
        start = self._skip
        end = None if self._limit is None else start + self._limit
        docs = [dict(d) for d in self._docs[start:end]]
        return docs if length is None else docs[:length]

    async def explain(self):
        """
        Produce a minimal winning plan for the cursor's filter.

        An equality filter on the leading key of an existing index yields
        FETCH over IXSCAN; anything else yields a COLLSCAN.
        """
        stage = {"stage": "COLLSCAN", "filter": self._query, "direction": "forward"}
        for name, keys in self._collection.indexes.items():
            if keys[0][0] in self._query:
                stage = {
                    "stage": "FETCH",
                    "inputStage": {
                        "stage": "IXSCAN",
                        "keyPattern": dict(keys),
                        "indexName": name,
                    },
                }
                break
        return {
            "queryPlanner": {
                "namespace": "plp_bookstore.books",
                "winningPlan": stage,
            },
            "ok": 1.0,
        }


class FakeCollection:
    def __init__(self, docs=None):
        self.docs = []
        self.indexes = {"_id_": [("_id", 1)]}
        for d in docs or []:
            d = dict(d)
            d.setdefault("_id", ObjectId())
            self.docs.append(d)

    def find(self, q=None, projection=None):
        q = q or {}
        matched = [d for d in self.docs if _matches(d, q)]
        return FakeCursor([_project(d, projection) for d in matched], self, q)

    async def find_one(self, q=None):
        for d in self.docs:
            if _matches(d, q):
                return dict(d)
        return None

    async def count_documents(self, q=None):
        return sum(1 for d in self.docs if _matches(d, q))

    async def insert_many(self, docs):
        """
        Insert documents, assigning an ObjectId where _id is missing.

        Like the driver, the passed dicts receive their _id in place.
        """
        ids = []
        for doc in docs:
            if "_id" not in doc:
                doc["_id"] = ObjectId()
            self.docs.append(dict(doc))
            ids.append(doc["_id"])
        return SimpleNamespace(inserted_ids=ids)

    async def delete_many(self, q):
        before = len(self.docs)
        self.docs = [d for d in self.docs if not _matches(d, q)]
        return SimpleNamespace(deleted_count=before - len(self.docs))

    async def delete_one(self, q):
        for i, d in enumerate(self.docs):
            if _matches(d, q):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def update_one(self, q, u):
        """
        Apply a $set update to the first matching document.

        Returns:
            SimpleNamespace: matched_count and modified_count, with
            modified_count 0 when the values were already in place.
        """
        for d in self.docs:
            if _matches(d, q):
                changes = u.get("$set", {})
                modified = any(d.get(k) != v for k, v in changes.items())
                d.update(changes)
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    def aggregate(self, pipeline):
        docs = [dict(d) for d in self.docs]
        for stage in pipeline:
            op, spec = next(iter(stage.items()))
            if op == "$group":
                docs = _group(docs, spec)
            elif op == "$sort":
                docs = _sort_docs(docs, list(spec.items()))
            elif op == "$limit":
                docs = docs[:spec]
            else:
                raise NotImplementedError(op)
        return FakeCursor(docs, self)

    async def create_index(self, keys, name=None):
        if name is None:
            name = "_".join(f"{k}_{d}" for k, d in keys)
        self.indexes[name] = list(keys)
        return name

    async def drop_index(self, name):
        if name not in self.indexes:
            raise OperationFailure(
                f"index not found with name [{name}]",
                code=27,
                details={"codeName": "IndexNotFound"},
            )
        del self.indexes[name]

    async def index_information(self):
        return {name: {"key": keys} for name, keys in self.indexes.items()}


@pytest.fixture
def empty_books():
    """An empty in-memory books collection."""
    return FakeCollection()


@pytest.fixture
def books():
    """
    In-memory books collection pre-loaded with the twelve seed records.

    Used in place of a Motor collection so query, aggregation and index
    behaviour can be checked without a running MongoDB server.
    """
    return FakeCollection(seed_documents())
