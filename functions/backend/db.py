"""
Document store abstraction for Firestore and an in-memory test implementation.

Documents are plain dicts in their stored (camelCase) shape. Callers convert
to and from dataclasses with `shared.json_utils`.
"""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from shared.constants import (
    ACCOUNTANTS_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    JOB_APPLICATIONS_COLLECTION,
    JOBS_COLLECTION,
    NOTIFICATIONS_COLLECTION,
    USERS_COLLECTION,
    WITHDRAWAL_REQUESTS_COLLECTION,
)
from shared.types import WithdrawalStatus

logger = logging.getLogger(__name__)

Document = Tuple[str, dict]


class DocumentNotFoundError(LookupError):
    """Raised when an update targets a document that does not exist."""


class InsufficientBalanceError(ValueError):
    """Raised when a debit exceeds the user's wallet balance."""


class ConflictError(Exception):
    """Raised when a write conflicts with the document's current state."""


class DbClient(Protocol):
    """Interface for document access."""

    # Users
    def get_user(self, uid: str) -> Optional[dict]:
        ...

    def create_user(self, uid: str, doc: dict) -> None:
        ...

    def update_user(self, uid: str, fields: dict) -> None:
        ...

    def delete_user_field(self, uid: str, field_name: str) -> None:
        ...

    def find_users(self, field_name: str, value) -> List[Document]:
        ...

    def list_users(self) -> List[Document]:
        ...

    def increment_wallet(self, uid: str, amount: float) -> None:
        ...

    # Notifications
    def add_notification(self, doc: dict) -> str:
        ...

    def add_notifications(self, docs: List[dict]) -> int:
        ...

    def get_notification(self, notification_id: str) -> Optional[dict]:
        ...

    def list_notifications(self, user_id: str) -> List[Document]:
        ...

    def update_notification(self, notification_id: str, fields: dict) -> None:
        ...

    def update_notifications(self, notification_ids: List[str], fields: dict) -> int:
        ...

    # Jobs and applications
    def get_job(self, job_id: str) -> Optional[dict]:
        ...

    def get_application(self, application_id: str) -> Optional[dict]:
        ...

    def update_application(self, application_id: str, fields: dict) -> None:
        ...

    # Withdrawals
    def create_withdrawal(self, uid: str, doc: dict) -> str:
        ...

    def get_withdrawal(self, request_id: str) -> Optional[dict]:
        ...

    def list_withdrawals(self, status: Optional[str] = None) -> List[Document]:
        ...

    def settle_withdrawal(self, request_id: str, fields: dict, refund: bool) -> dict:
        ...

    # Accountants
    def add_accountant(self, uid: str, doc: dict) -> None:
        ...

    def list_accountants(self) -> List[Document]:
        ...

    def delete_accountant(self, uid: str) -> bool:
        ...


def _newest_first(documents: Iterable[Document]) -> List[Document]:
    return sorted(documents, key=lambda item: item[1].get("createdAt") or 0, reverse=True)


def _chunks(items: List, size: int = FIRESTORE_BATCH_LIMIT) -> Iterable[List]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.collections: Dict[str, Dict[str, dict]] = {
            USERS_COLLECTION: {},
            JOBS_COLLECTION: {},
            JOB_APPLICATIONS_COLLECTION: {},
            NOTIFICATIONS_COLLECTION: {},
            WITHDRAWAL_REQUESTS_COLLECTION: {},
            ACCOUNTANTS_COLLECTION: {},
        }

    def _get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self.collections[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _update(self, collection: str, doc_id: str, fields: dict) -> None:
        doc = self.collections[collection].get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(f"{collection}/{doc_id} not found")
        doc.update(copy.deepcopy(fields))

    def _add(self, collection: str, doc: dict) -> str:
        doc_id = uuid.uuid4().hex
        self.collections[collection][doc_id] = copy.deepcopy(doc)
        return doc_id

    def _all(self, collection: str) -> List[Document]:
        return [
            (doc_id, copy.deepcopy(doc))
            for doc_id, doc in self.collections[collection].items()
        ]

    def seed(self, collection: str, doc_id: str, doc: dict) -> None:
        """Writes a document directly, for tests and local fixtures."""
        self.collections[collection][doc_id] = copy.deepcopy(doc)

    def get_user(self, uid: str) -> Optional[dict]:
        return self._get(USERS_COLLECTION, uid)

    def create_user(self, uid: str, doc: dict) -> None:
        self.collections[USERS_COLLECTION][uid] = copy.deepcopy(doc)

    def update_user(self, uid: str, fields: dict) -> None:
        self._update(USERS_COLLECTION, uid, fields)

    def delete_user_field(self, uid: str, field_name: str) -> None:
        doc = self.collections[USERS_COLLECTION].get(uid)
        if doc is not None:
            doc.pop(field_name, None)

    def find_users(self, field_name: str, value) -> List[Document]:
        return [
            (uid, doc)
            for uid, doc in self._all(USERS_COLLECTION)
            if doc.get(field_name) == value
        ]

    def list_users(self) -> List[Document]:
        return self._all(USERS_COLLECTION)

    def increment_wallet(self, uid: str, amount: float) -> None:
        doc = self.collections[USERS_COLLECTION].get(uid)
        if doc is None:
            raise DocumentNotFoundError(f"{USERS_COLLECTION}/{uid} not found")
        doc["walletBalance"] = (doc.get("walletBalance") or 0) + amount

    def add_notification(self, doc: dict) -> str:
        return self._add(NOTIFICATIONS_COLLECTION, doc)

    def add_notifications(self, docs: List[dict]) -> int:
        for doc in docs:
            self._add(NOTIFICATIONS_COLLECTION, doc)
        return len(docs)

    def get_notification(self, notification_id: str) -> Optional[dict]:
        return self._get(NOTIFICATIONS_COLLECTION, notification_id)

    def list_notifications(self, user_id: str) -> List[Document]:
        return _newest_first(
            item
            for item in self._all(NOTIFICATIONS_COLLECTION)
            if item[1].get("userId") == user_id
        )

    def update_notification(self, notification_id: str, fields: dict) -> None:
        self._update(NOTIFICATIONS_COLLECTION, notification_id, fields)

    def update_notifications(self, notification_ids: List[str], fields: dict) -> int:
        for notification_id in notification_ids:
            self._update(NOTIFICATIONS_COLLECTION, notification_id, fields)
        return len(notification_ids)

    def get_job(self, job_id: str) -> Optional[dict]:
        return self._get(JOBS_COLLECTION, job_id)

    def get_application(self, application_id: str) -> Optional[dict]:
        return self._get(JOB_APPLICATIONS_COLLECTION, application_id)

    def update_application(self, application_id: str, fields: dict) -> None:
        self._update(JOB_APPLICATIONS_COLLECTION, application_id, fields)

    def create_withdrawal(self, uid: str, doc: dict) -> str:
        user = self.collections[USERS_COLLECTION].get(uid)
        if user is None:
            raise DocumentNotFoundError(f"{USERS_COLLECTION}/{uid} not found")
        balance = user.get("walletBalance") or 0
        if balance < doc["amount"]:
            raise InsufficientBalanceError("Insufficient wallet balance")
        user["walletBalance"] = balance - doc["amount"]
        return self._add(WITHDRAWAL_REQUESTS_COLLECTION, doc)

    def get_withdrawal(self, request_id: str) -> Optional[dict]:
        return self._get(WITHDRAWAL_REQUESTS_COLLECTION, request_id)

    def list_withdrawals(self, status: Optional[str] = None) -> List[Document]:
        return _newest_first(
            item
            for item in self._all(WITHDRAWAL_REQUESTS_COLLECTION)
            if status is None or item[1].get("status") == status
        )

    def settle_withdrawal(self, request_id: str, fields: dict, refund: bool) -> dict:
        request = self.collections[WITHDRAWAL_REQUESTS_COLLECTION].get(request_id)
        if request is None:
            raise DocumentNotFoundError(
                f"{WITHDRAWAL_REQUESTS_COLLECTION}/{request_id} not found"
            )
        if request.get("status") != WithdrawalStatus.PENDING:
            raise ConflictError(f"Withdrawal request is already {request.get('status')}")
        if refund:
            self.increment_wallet(request["uid"], request["amount"])
        request.update(copy.deepcopy(fields))
        return copy.deepcopy(request)

    def add_accountant(self, uid: str, doc: dict) -> None:
        self.collections[ACCOUNTANTS_COLLECTION][uid] = copy.deepcopy(doc)

    def list_accountants(self) -> List[Document]:
        return _newest_first(self._all(ACCOUNTANTS_COLLECTION))

    def delete_accountant(self, uid: str) -> bool:
        return self.collections[ACCOUNTANTS_COLLECTION].pop(uid, None) is not None


@firestore.transactional
def _debit_and_create_withdrawal(transaction, user_ref, request_ref, doc: dict) -> None:
    snapshot = user_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise DocumentNotFoundError(f"{USERS_COLLECTION}/{user_ref.id} not found")
    balance = (snapshot.to_dict() or {}).get("walletBalance") or 0
    if balance < doc["amount"]:
        raise InsufficientBalanceError("Insufficient wallet balance")
    transaction.update(user_ref, {"walletBalance": balance - doc["amount"]})
    transaction.set(request_ref, doc)


@firestore.transactional
def _settle_withdrawal(transaction, db, request_ref, fields: dict, refund: bool) -> dict:
    snapshot = request_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise DocumentNotFoundError(
            f"{WITHDRAWAL_REQUESTS_COLLECTION}/{request_ref.id} not found"
        )
    request = snapshot.to_dict() or {}
    if request.get("status") != WithdrawalStatus.PENDING:
        raise ConflictError(f"Withdrawal request is already {request.get('status')}")
    if refund:
        user_ref = db.collection(USERS_COLLECTION).document(request["uid"])
        transaction.update(
            user_ref, {"walletBalance": firestore.Increment(request["amount"])}
        )
    transaction.update(request_ref, fields)
    return {**request, **fields}


class FirestoreDbClient:
    """Firestore-backed document store using the firebase-admin SDK."""

    def __init__(self, client=None):
        self.db = client or firestore.client()

    def _collection(self, name: str):
        return self.db.collection(name)

    def _get(self, collection: str, doc_id: str) -> Optional[dict]:
        snapshot = self._collection(collection).document(doc_id).get()
        return snapshot.to_dict() if snapshot.exists else None

    def _update(self, collection: str, doc_id: str, fields: dict) -> None:
        ref = self._collection(collection).document(doc_id)
        if not ref.get().exists:
            raise DocumentNotFoundError(f"{collection}/{doc_id} not found")
        ref.update(fields)

    def _query(self, collection: str, field_name: str, value) -> List[Document]:
        query = self._collection(collection).where(
            filter=FieldFilter(field_name, "==", value)
        )
        return [(snapshot.id, snapshot.to_dict()) for snapshot in query.stream()]

    def _stream(self, collection: str) -> List[Document]:
        return [
            (snapshot.id, snapshot.to_dict())
            for snapshot in self._collection(collection).stream()
        ]

    def get_user(self, uid: str) -> Optional[dict]:
        return self._get(USERS_COLLECTION, uid)

    def create_user(self, uid: str, doc: dict) -> None:
        self._collection(USERS_COLLECTION).document(uid).set(doc)

    def update_user(self, uid: str, fields: dict) -> None:
        self._update(USERS_COLLECTION, uid, fields)

    def delete_user_field(self, uid: str, field_name: str) -> None:
        self._collection(USERS_COLLECTION).document(uid).update(
            {field_name: firestore.DELETE_FIELD}
        )

    def find_users(self, field_name: str, value) -> List[Document]:
        return self._query(USERS_COLLECTION, field_name, value)

    def list_users(self) -> List[Document]:
        return self._stream(USERS_COLLECTION)

    def increment_wallet(self, uid: str, amount: float) -> None:
        self._update(
            USERS_COLLECTION, uid, {"walletBalance": firestore.Increment(amount)}
        )

    def add_notification(self, doc: dict) -> str:
        _, ref = self._collection(NOTIFICATIONS_COLLECTION).add(doc)
        return ref.id

    def add_notifications(self, docs: List[dict]) -> int:
        """Writes the notifications in batches of at most 500 writes."""
        collection = self._collection(NOTIFICATIONS_COLLECTION)
        for chunk in _chunks(docs):
            batch = self.db.batch()
            for doc in chunk:
                batch.set(collection.document(), doc)
            batch.commit()
        return len(docs)

    def get_notification(self, notification_id: str) -> Optional[dict]:
        return self._get(NOTIFICATIONS_COLLECTION, notification_id)

    def list_notifications(self, user_id: str) -> List[Document]:
        return _newest_first(self._query(NOTIFICATIONS_COLLECTION, "userId", user_id))

    def update_notification(self, notification_id: str, fields: dict) -> None:
        self._update(NOTIFICATIONS_COLLECTION, notification_id, fields)

    def update_notifications(self, notification_ids: List[str], fields: dict) -> int:
        collection = self._collection(NOTIFICATIONS_COLLECTION)
        for chunk in _chunks(notification_ids):
            batch = self.db.batch()
            for notification_id in chunk:
                batch.update(collection.document(notification_id), fields)
            batch.commit()
        return len(notification_ids)

    def get_job(self, job_id: str) -> Optional[dict]:
        return self._get(JOBS_COLLECTION, job_id)

    def get_application(self, application_id: str) -> Optional[dict]:
        return self._get(JOB_APPLICATIONS_COLLECTION, application_id)

    def update_application(self, application_id: str, fields: dict) -> None:
        self._update(JOB_APPLICATIONS_COLLECTION, application_id, fields)

    def create_withdrawal(self, uid: str, doc: dict) -> str:
        user_ref = self._collection(USERS_COLLECTION).document(uid)
        request_ref = self._collection(WITHDRAWAL_REQUESTS_COLLECTION).document()
        _debit_and_create_withdrawal(self.db.transaction(), user_ref, request_ref, doc)
        return request_ref.id

    def get_withdrawal(self, request_id: str) -> Optional[dict]:
        return self._get(WITHDRAWAL_REQUESTS_COLLECTION, request_id)

    def list_withdrawals(self, status: Optional[str] = None) -> List[Document]:
        if status is None:
            return _newest_first(self._stream(WITHDRAWAL_REQUESTS_COLLECTION))
        return _newest_first(
            self._query(WITHDRAWAL_REQUESTS_COLLECTION, "status", status)
        )

    def settle_withdrawal(self, request_id: str, fields: dict, refund: bool) -> dict:
        request_ref = self._collection(WITHDRAWAL_REQUESTS_COLLECTION).document(
            request_id
        )
        return _settle_withdrawal(
            self.db.transaction(), self.db, request_ref, fields, refund
        )

    def add_accountant(self, uid: str, doc: dict) -> None:
        self._collection(ACCOUNTANTS_COLLECTION).document(uid).set(doc)

    def list_accountants(self) -> List[Document]:
        return _newest_first(self._stream(ACCOUNTANTS_COLLECTION))

    def delete_accountant(self, uid: str) -> bool:
        ref = self._collection(ACCOUNTANTS_COLLECTION).document(uid)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
