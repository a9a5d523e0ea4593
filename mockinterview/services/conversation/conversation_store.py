"""
Conversation Store Module

This module persists conversational interviews in MongoDB. Every mutation is a
single-document update guarded by the state it depends on, so concurrent
requests for the same conversation cannot lose writes:

- appending a message is one $push guarded by status != completed;
- completing is one guarded $set/$unset;
- creation is guarded by the unique sparse index on openKey.

When a guarded update matches nothing, the document is read back to report why
(missing, not owned, completed, or already started).

Dependencies:
- motor: For async MongoDB interactions.
- pymongo: For ReturnDocument and DuplicateKeyError.
- bson: For ObjectId handling.
- loguru: For logging.

Author: @kcaparas1630
"""

from typing import Any, Dict, List, Optional, Tuple
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from loguru import logger
from mockinterview.database import CONVERSATIONS_COLLECTION
from mockinterview.errors.exceptions import (
    AuthorizationError,
    ConversationClosedError,
    ConversationNotFound,
    PersistenceError,
    ValidationError,
)
from mockinterview.models.conversation_models import (
    Conversation,
    ConversationMessage,
    ConversationStatus,
    FinalFeedback,
    NON_TERMINAL_STATUSES,
    utc_now,
)

_NON_TERMINAL_VALUES = [status.value for status in NON_TERMINAL_STATUSES]


def open_key(session_id: str, user_id: str) -> str:
    return f"{session_id}:{user_id}"


class ConversationStore:
    """
    CRUD surface over conversation documents.

    Args:
        db: Motor database holding the conversations collection
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[CONVERSATIONS_COLLECTION]

    @staticmethod
    def _object_id(conversation_id: str) -> ObjectId:
        if not conversation_id or not ObjectId.is_valid(conversation_id):
            raise ConversationNotFound(conversation_id)
        return ObjectId(conversation_id)

    async def create_or_reuse(self, session_id: str, user_id: str) -> Tuple[Conversation, bool]:
        """
        Return the open conversation for (session, user), creating one if none exists.

        Returns:
            Tuple of the conversation and whether it was newly created
        """
        key = open_key(session_id, user_id)
        existing = await self.collection.find_one({"openKey": key})
        if existing:
            logger.info(f"Reusing open conversation {existing['_id']} for session {session_id}")
            return Conversation.model_validate(existing), False

        now = utc_now()
        document = {
            "session": session_id,
            "user": user_id,
            "status": ConversationStatus.ACTIVE.value,
            "messages": [],
            "openKey": key,
            "startedAt": now,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            # A concurrent request created it between our read and insert
            logger.warning(f"Lost create race for session {session_id}, returning the winner's conversation")
            existing = await self.collection.find_one({"openKey": key})
            if existing is None:
                raise PersistenceError(error=f"Open conversation for session {session_id} vanished after duplicate key")
            return Conversation.model_validate(existing), False

        document["_id"] = result.inserted_id
        logger.info(f"Created conversation {result.inserted_id} for session {session_id}")
        return Conversation.model_validate(document), True

    async def get_by_id(self, conversation_id: str, user_id: str) -> Conversation:
        oid = self._object_id(conversation_id)
        document = await self.collection.find_one({"_id": oid})
        if document is None:
            raise ConversationNotFound(conversation_id)
        if document.get("user") != user_id:
            raise AuthorizationError()
        return Conversation.model_validate(document)

    async def list_by_user(self, user_id: str) -> List[Conversation]:
        """All conversations owned by user_id, newest first."""
        cursor = self.collection.find({"user": user_id}).sort([("createdAt", -1), ("_id", -1)])
        documents = await cursor.to_list(length=None)
        return [Conversation.model_validate(document) for document in documents]

    async def append_message(
        self,
        conversation_id: str,
        user_id: str,
        message: ConversationMessage,
        require_empty_log: bool = False,
    ) -> Conversation:
        """
        Atomically push one message onto the conversation's log.

        Args:
            conversation_id: Conversation to append to
            user_id: Acting user, must own the conversation
            message: The message to append
            require_empty_log: Only append if the log is still empty

        Returns:
            The conversation after the append

        Raises:
            ConversationNotFound: If the conversation does not exist
            AuthorizationError: If user_id does not own it
            ConversationClosedError: If it is completed
            ValidationError: If require_empty_log and the log already has messages
        """
        return await self.append_messages(conversation_id, user_id, [message], require_empty_log=require_empty_log)

    async def append_messages(
        self,
        conversation_id: str,
        user_id: str,
        messages: List[ConversationMessage],
        require_empty_log: bool = False,
    ) -> Conversation:
        """Push several messages in one update, keeping their order. Same errors as append_message."""
        oid = self._object_id(conversation_id)
        query: Dict[str, Any] = {
            "_id": oid,
            "user": user_id,
            "status": {"$ne": ConversationStatus.COMPLETED.value},
        }
        if require_empty_log:
            query["messages"] = {"$size": 0}

        document = await self.collection.find_one_and_update(
            query,
            {
                "$push": {"messages": {"$each": [message.model_dump() for message in messages]}},
                "$set": {"updatedAt": utc_now()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            await self._raise_rejection(oid, conversation_id, user_id, require_empty_log=require_empty_log)
        logger.debug(f"Appended {len(messages)} message(s) to conversation {conversation_id}")
        return Conversation.model_validate(document)

    async def mark_completed(
        self,
        conversation_id: str,
        user_id: str,
        final_feedback: FinalFeedback,
        duration: Optional[float],
        closing_message: Optional[ConversationMessage] = None,
    ) -> Conversation:
        """
        Move a non-terminal conversation to completed and store its evaluation.

        The closing interviewer message, when given, is pushed in the same update.

        Raises:
            ConversationNotFound: If the conversation does not exist
            AuthorizationError: If user_id does not own it
            ConversationClosedError: If it is already completed
        """
        oid = self._object_id(conversation_id)
        now = utc_now()
        update: Dict[str, Any] = {
            "$set": {
                "status": ConversationStatus.COMPLETED.value,
                "finalFeedback": final_feedback.model_dump(),
                "duration": duration,
                "completedAt": now,
                "updatedAt": now,
            },
            "$unset": {"openKey": ""},
        }
        if closing_message is not None:
            update["$push"] = {"messages": closing_message.model_dump()}

        document = await self.collection.find_one_and_update(
            {"_id": oid, "user": user_id, "status": {"$in": _NON_TERMINAL_VALUES}},
            update,
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            await self._raise_rejection(oid, conversation_id, user_id)
        logger.info(f"Conversation {conversation_id} completed")
        return Conversation.model_validate(document)

    async def set_status(self, conversation_id: str, user_id: str, status: ConversationStatus) -> Conversation:
        """Switch a conversation between active and paused."""
        if status not in NON_TERMINAL_STATUSES:
            raise ValueError("set_status only moves between active and paused; use mark_completed to finish")

        oid = self._object_id(conversation_id)
        document = await self.collection.find_one_and_update(
            {"_id": oid, "user": user_id, "status": {"$in": _NON_TERMINAL_VALUES}},
            {"$set": {"status": status.value, "updatedAt": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            await self._raise_rejection(oid, conversation_id, user_id)
        logger.info(f"Conversation {conversation_id} is now {status.value}")
        return Conversation.model_validate(document)

    async def _raise_rejection(self, oid: ObjectId, conversation_id: str, user_id: str, require_empty_log: bool = False):
        """Explain why a guarded update matched no document."""
        document = await self.collection.find_one({"_id": oid})
        if document is None:
            raise ConversationNotFound(conversation_id)
        if document.get("user") != user_id:
            raise AuthorizationError()
        if document.get("status") == ConversationStatus.COMPLETED.value:
            raise ConversationClosedError(conversation_id)
        if require_empty_log and document.get("messages"):
            raise ValidationError("Conversation has already started")
        raise PersistenceError(error=f"Update to conversation {conversation_id} was not applied")
