"""
Test doubles and constants shared by the test modules.

Author: @kcaparas1630
"""

from types import SimpleNamespace

USER_ID = "firebase-user-1"
OTHER_USER_ID = "firebase-user-2"

ROLE = "Backend Engineer"
EXPERIENCE = 2
TOPICS = "Node.js, databases"


class FakeCompletions:
    """Stands in for client.chat.completions; replays queued replies in order."""

    def __init__(self):
        self.replies = []
        self.prompts = []

    async def create(self, model, messages, **kwargs):
        self.prompts.append(messages[0]["content"])
        if not self.replies:
            raise AssertionError("Unexpected generation call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeOpenAI:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)

    def queue(self, *replies):
        self.completions.replies.extend(replies)

    @property
    def calls(self):
        return len(self.completions.prompts)
