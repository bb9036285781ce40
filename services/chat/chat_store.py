"""Simple in-memory store for chat sessions."""

from __future__ import annotations

from typing import Dict
from uuid import uuid4

from models.session_models import ROLE_ASSISTANT, ChatMessage, ChatSession
from services.gemini.prompts import CHAT_GREETING


class ChatStore:
	"""Create chat sessions and append to their transcripts."""

	def __init__(self, greeting: str = CHAT_GREETING) -> None:
		self.greeting = greeting
		self._sessions: Dict[str, ChatSession] = {}

	def create(self) -> ChatSession:
		"""Create a session whose transcript opens with the assistant greeting."""
		session = ChatSession(session_id=uuid4().hex)
		session.messages.append(ChatMessage(role=ROLE_ASSISTANT, text=self.greeting))
		self._sessions[session.session_id] = session
		return session

	def get(self, session_id: str) -> ChatSession:
		"""Return a session or raise KeyError if missing."""
		session = self._sessions.get(session_id)
		if session is None:
			raise KeyError(f"Chat session {session_id} not found")
		return session

	def set_draft(self, session_id: str, text: str) -> ChatSession:
		session = self.get(session_id)
		session.draft = text
		return session

	def delete(self, session_id: str) -> None:
		"""Drop a session and its transcript. Raises KeyError if missing."""
		self.get(session_id)
		del self._sessions[session_id]
