"""
Firestore persistence for conversation turns and user profiles.

Turns live in one flat collection keyed by ``userId``. They are appended
with a server timestamp, read back in timestamp order, and only ever removed
all at once for a user through a single write batch.
"""
import logging
from typing import List

import pydantic
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import GENERIC_DELETE_ERROR, PersistenceError
from .schemas import ConversationTurn, Profile

logger = logging.getLogger(__name__)

MAX_BATCH_WRITES = 500


class ConversationStore:
    def __init__(self, db, collection="conversations", users_collection="users"):
        self.db = db
        self.collection = collection
        self.users_collection = users_collection

    def _turns(self):
        return self.db.collection(self.collection)

    def _user_query(self, user_id):
        return self._turns().where(filter=FieldFilter("userId", "==", user_id))

    def append_turn(self, user_id, user_message, ai_message, sentiment) -> str:
        """Write one new turn and return its document id."""
        record = {
            "userId": user_id,
            "userMessage": user_message,
            "aiMessage": ai_message,
            "sentiment": sentiment,
            "timestamp": firestore.SERVER_TIMESTAMP,
        }
        try:
            _, doc_ref = self._turns().add(record)
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[append_turn] Firestore write failed for %s: %s", user_id, e)
            raise PersistenceError(str(e)) from e
        return doc_ref.id

    def list_turns(self, user_id) -> List[ConversationTurn]:
        query = self._user_query(user_id).order_by("timestamp", direction=firestore.Query.ASCENDING)
        try:
            snapshots = list(query.stream())
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[list_turns] Firestore query failed for %s: %s", user_id, e)
            raise PersistenceError(str(e)) from e

        turns = []
        for snap in snapshots:
            data = snap.to_dict() or {}
            try:
                turns.append(ConversationTurn(id=snap.id, **data))
            except pydantic.ValidationError as e:
                logger.warning("[list_turns] skipping malformed turn %s: %s", snap.id, e)
        return turns

    def delete_history(self, user_id) -> int:
        """Delete every turn owned by ``user_id`` in one batch. Returns the count.

        Firestore caps a write batch at 500 operations, so a history longer
        than that cannot be erased in one commit and fails as a whole.
        """
        try:
            snapshots = list(self._user_query(user_id).stream())
            if not snapshots:
                return 0
            if len(snapshots) > MAX_BATCH_WRITES:
                logger.warning("[delete_history] %d turns for %s exceed the %d-write batch limit",
                               len(snapshots), user_id, MAX_BATCH_WRITES)
            batch = self.db.batch()
            for snap in snapshots:
                batch.delete(snap.reference)
            batch.commit()
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[delete_history] batch delete failed for %s: %s", user_id, e)
            raise PersistenceError(str(e), user_message=GENERIC_DELETE_ERROR) from e
        logger.info("Deleted %d turns for %s", len(snapshots), user_id)
        return len(snapshots)

    # ---------- profiles ----------

    def get_profile(self, user_id) -> Profile:
        try:
            doc = self.db.collection(self.users_collection).document(user_id).get()
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        if not doc.exists:
            return Profile()
        data = doc.to_dict() or {}
        return Profile(
            full_name=data.get("fullName") or "",
            dob=data.get("dob"),
            phone=data.get("phone"),
        )

    def save_profile(self, user_id, full_name, dob, phone=None):
        record = {
            "fullName": full_name,
            "dob": dob,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        if phone:
            record["phone"] = phone
        try:
            self.db.collection(self.users_collection).document(user_id).set(record, merge=True)
        except google_exceptions.GoogleAPICallError as e:
            logger.error("[save_profile] Firestore update failed for %s: %s", user_id, e)
            raise PersistenceError(str(e), user_message="An error occurred while updating your profile.") from e
