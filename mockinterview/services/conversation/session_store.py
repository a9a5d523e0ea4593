"""
Description:
Read-only lookup of interview-prep sessions.

Sessions are owned by the session management side of the product. This module
only reads the fields a conversation needs: role, experience and focus topics.
Ids may be stored as ObjectIds or plain strings.

Dependencies:
- motor: For async MongoDB interactions.
- bson: For ObjectId handling.
- loguru: For logging.

Author: @kcaparas1630
"""
from typing import Any, Dict, Iterable, Optional
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from loguru import logger
from mockinterview.database import SESSIONS_COLLECTION
from mockinterview.errors.exceptions import AuthorizationError, SessionNotFound
from mockinterview.models.conversation_models import SessionSummary

_PROJECTION = {"role": 1, "experience": 1, "topicsToFocus": 1, "user": 1}


def _id_candidates(session_id: str) -> list:
    candidates: list = [session_id]
    if ObjectId.is_valid(session_id):
        candidates.append(ObjectId(session_id))
    return candidates


class SessionStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[SESSIONS_COLLECTION]

    async def find(self, session_id: str) -> Optional[Dict[str, Any]]:
        if not session_id:
            return None
        return await self.collection.find_one({"_id": {"$in": _id_candidates(session_id)}}, _PROJECTION)

    async def get_owned_session(self, session_id: str, user_id: str) -> SessionSummary:
        """
        Fetch a session the user is allowed to interview against.

        Raises:
            SessionNotFound: If no session has this id
            AuthorizationError: If the session belongs to another user
        """
        document = await self.find(session_id)
        if document is None:
            logger.info(f"Session {session_id} not found")
            raise SessionNotFound(session_id)
        owner = document.get("user")
        if owner is not None and str(owner) != user_id:
            raise AuthorizationError("Not authorized to use this session")
        return SessionSummary.model_validate(document)

    async def get_summaries(self, session_ids: Iterable[str]) -> Dict[str, SessionSummary]:
        """Map each known session id to its summary. Unknown ids are left out."""
        ids = {session_id for session_id in session_ids if session_id}
        if not ids:
            return {}
        candidates = [candidate for session_id in ids for candidate in _id_candidates(session_id)]
        cursor = self.collection.find({"_id": {"$in": candidates}}, _PROJECTION)
        documents = await cursor.to_list(length=None)
        return {str(document["_id"]): SessionSummary.model_validate(document) for document in documents}
