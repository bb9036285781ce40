"""FastAPI routes for the skin-health chat assistant."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.chat_controller import (
	end_session,
	get_session,
	list_suggestions,
	send_message,
	set_draft,
	start_session,
	use_suggestion,
)

router = APIRouter(prefix="/chat")


class MessagePayload(BaseModel):
	text: Optional[str] = None


class DraftPayload(BaseModel):
	text: str = ""


@router.get("/suggestions")
async def list_suggestions_route():
	return await list_suggestions()


@router.post("/sessions")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/sessions/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/sessions/{session_id}")
async def delete_session_route(request: Request, session_id: str):
	try:
		return await end_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/sessions/{session_id}/messages")
async def post_message_route(request: Request, session_id: str, payload: MessagePayload):
	try:
		return await send_message(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.put("/sessions/{session_id}/draft")
async def put_draft_route(request: Request, session_id: str, payload: DraftPayload):
	try:
		return await set_draft(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/sessions/{session_id}/suggestions/{index}")
async def use_suggestion_route(request: Request, session_id: str, index: int):
	try:
		return await use_suggestion(request, session_id, index)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
