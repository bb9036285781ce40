"""Chat session domain models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
	"""One transcript entry; never edited once appended."""

	role: str
	text: str
	created_at: float = field(default_factory=lambda: time.time())

	def to_dict(self) -> Dict[str, Any]:
		return {"role": self.role, "text": self.text, "created_at": self.created_at}


@dataclass
class ChatSession:
	"""In-memory chat state: append-only transcript plus the pending input draft."""

	session_id: str
	messages: List[ChatMessage] = field(default_factory=list)
	draft: str = ""
	pending: bool = False

	def to_dict(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"messages": [message.to_dict() for message in self.messages],
			"draft": self.draft,
			"pending": self.pending,
		}
