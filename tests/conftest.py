"""Common utilities for tests."""

import unittest.mock
from typing import Any, Iterator, Optional

from mockfirestore import CollectionReference, Query
from mockfirestore.document import DocumentReference

MOCK_SERVER_TIMESTAMP = "2023-01-01"

# Every module that binds ``firestore`` at import time.
FIRESTORE_MODULES = (
    "rushx",
    "rushx.tournament.services",
    "rushx.notifications.services",
    "rushx.referral.services",
    "rushx.referral.routes",
    "rushx.enrollment.services",
    "rushx.enrollment.routes",
    "rushx.teams.services",
    "rushx.teams.routes",
)


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


class MockArrayUnion:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockArrayRemove:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockIncrement:
    def __init__(self, value: int) -> None:
        self.value = value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and sentinels."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq

    # get_all() puts references in a set
    if getattr(DocumentReference, "__hash__", None) is None:
        DocumentReference.__hash__ = lambda self: hash(tuple(self._path))

    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            current_data = self.get().to_dict() or {}
            new_data = {}
            for k, v in data.items():
                if isinstance(v, MockIncrement):
                    new_data[k] = (current_data.get(k) or 0) + v.value
                elif isinstance(v, MockArrayUnion):
                    existing = current_data.get(k, [])
                    if not isinstance(existing, list):
                        existing = []
                    merged = list(existing)
                    for item in v.values:
                        if item not in merged:
                            merged.append(item)
                    new_data[k] = merged
                elif isinstance(v, MockArrayRemove):
                    existing = current_data.get(k, [])
                    if not isinstance(existing, list):
                        existing = []
                    new_data[k] = [i for i in existing if i not in v.values]
                else:
                    new_data[k] = v
            return self._orig_update(new_data)

        DocumentReference.update = patched_update


def build_firestore_module(db: Any) -> unittest.mock.MagicMock:
    """A stand-in for ``firebase_admin.firestore`` backed by ``db``."""
    module = unittest.mock.MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    module.ArrayUnion = MockArrayUnion
    module.ArrayRemove = MockArrayRemove
    module.Increment = MockIncrement
    module.SERVER_TIMESTAMP = MOCK_SERVER_TIMESTAMP
    return module


def patch_firestore(testcase: Any, db: Any) -> unittest.mock.MagicMock:
    """Point every rushx module's ``firestore`` at a mock for one test."""
    module = build_firestore_module(db)
    for target in FIRESTORE_MODULES:
        patcher = unittest.mock.patch(f"{target}.firestore", new=module)
        patcher.start()
        testcase.addCleanup(patcher.stop)
    return module
