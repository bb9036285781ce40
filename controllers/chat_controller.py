"""Chat session helpers for the skin-health assistant."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request

from controllers.http_errors import to_http_exception
from services.chat.chat_flow import ChatFlow
from services.chat.chat_store import ChatStore
from services.errors import ArogyaError
from services.gemini.prompts import SUGGESTED_QUESTIONS


def _get_session(store: ChatStore, session_id: str):
	try:
		return store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a chat session seeded with the assistant greeting."""
	store: ChatStore = request.app.state.chat_store
	return store.create().to_dict()


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	store: ChatStore = request.app.state.chat_store
	return _get_session(store, session_id).to_dict()


async def end_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Delete a chat session together with its transcript."""
	store: ChatStore = request.app.state.chat_store
	try:
		store.delete(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"session_id": session_id, "deleted": True}


async def send_message(request: Request, session_id: str, text: Optional[str]) -> Dict[str, Any]:
	"""Send `text`, or the session draft when no text is given, and return the transcript."""
	store: ChatStore = request.app.state.chat_store
	flow: ChatFlow = request.app.state.chat_flow
	session = _get_session(store, session_id)
	question = text if text is not None else session.draft
	try:
		session = await flow.send_message(session, question)
	except ArogyaError as exc:
		raise to_http_exception(exc) from exc
	return session.to_dict()


async def set_draft(request: Request, session_id: str, text: str) -> Dict[str, Any]:
	store: ChatStore = request.app.state.chat_store
	_get_session(store, session_id)
	return store.set_draft(session_id, text).to_dict()


async def use_suggestion(request: Request, session_id: str, index: int) -> Dict[str, Any]:
	"""Put a quick question into the session draft."""
	if index < 0 or index >= len(SUGGESTED_QUESTIONS):
		raise HTTPException(status_code=404, detail=f"Suggestion {index} not found")
	return await set_draft(request, session_id, SUGGESTED_QUESTIONS[index])


async def list_suggestions() -> Dict[str, Any]:
	return {"suggestions": list(SUGGESTED_QUESTIONS)}
