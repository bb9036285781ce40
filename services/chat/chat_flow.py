"""Send one chat message to the skin-health assistant."""

import logging
from typing import Optional

from models.inference_models import InferenceRequest
from models.session_models import ROLE_ASSISTANT, ROLE_USER, ChatMessage, ChatSession
from services.errors import ArogyaError, ChatInProgressError
from services.gemini.inference_client import GeminiInferenceClient
from services.gemini.prompts import CHAT_FALLBACK, build_chat_prompt


class ChatFlow:
    """Append the user's question and exactly one assistant reply per send.

    Failures never surface to the caller; they become the fallback reply so the
    conversation keeps going.
    """

    def __init__(self, client: GeminiInferenceClient, fallback: str = CHAT_FALLBACK) -> None:
        if client is None:
            raise ValueError("Inference client must be provided.")
        self.client = client
        self.fallback = fallback

    async def send_message(self, session: ChatSession, text: Optional[str]) -> ChatSession:
        question = (text or "").strip()
        if not question:
            return session
        if session.pending:
            raise ChatInProgressError("A reply is still pending for this session.")

        session.messages.append(ChatMessage(role=ROLE_USER, text=text))
        session.draft = ""
        session.pending = True
        try:
            reply = await self.client.invoke(InferenceRequest(prompt=build_chat_prompt(text)))
        except ArogyaError as exc:
            logging.error("Chat reply failed for session %s: %s", session.session_id, exc)
            reply = self.fallback
        finally:
            session.pending = False

        session.messages.append(ChatMessage(role=ROLE_ASSISTANT, text=reply))
        return session
