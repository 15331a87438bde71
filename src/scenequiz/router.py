from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Form, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from .config import settings
from .game import GameController
from .globals import scene_library, templates
from .models import GameView, Phase
from .sessions import SessionStore

router = APIRouter()


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def _rejected(message: str, game: GameController) -> JSONResponse:
    return JSONResponse(
        {"error": message, "phase": game.phase.value}, status_code=400
    )


# --- Routes ---
@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/api/scenes")
async def get_scenes():
    return scene_library.summary()


@router.get("/api/state", response_model=GameView)
async def get_state(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    game = sessions.get(session_id)
    if game is None:
        return GameView(phase=Phase.START)
    return game.snapshot()


@router.post("/api/start", response_model=GameView)
async def start_game(
    response: Response,
    restart: bool = Form(False),
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    game = sessions.get(session_id)
    if game is None:
        session_id, game = sessions.create()
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=session_id,
            httponly=True,
            samesite="lax",
        )

    if game.start(restart=restart) is None:
        return _rejected("A round is already in progress", game)
    return game.snapshot()


@router.post("/api/answer", response_model=GameView)
async def submit_answer(
    choice: bool = Form(...),
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    game = sessions.get(session_id)
    if game is None:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    if not game.submit_answer(choice):
        message = (
            "Already answered"
            if game.phase == Phase.SHOW_RESULT
            else "No question is waiting for an answer"
        )
        return _rejected(message, game)
    return game.snapshot()


@router.post("/api/advance", response_model=GameView)
async def advance(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    game = sessions.get(session_id)
    if game is None:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    if not game.advance():
        return _rejected("Answer the current question first", game)
    return game.snapshot()


@router.post("/api/reset")
async def reset_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_sessions),
):
    sessions.drop(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
