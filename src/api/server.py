from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager, suppress
from typing import Any, Dict, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.schemas import ChatRequest, ChatResponse, EndChatRequest, EndChatResponse
from src.app.errors import ArchiveError, InvalidRequestError
from src.app.logging import setup_logging
from src.app.settings import Settings, load_settings
from src.db.mongo import connect_mongo, ensure_indexes
from src.db.repositories import TranscriptRepo
from src.llms.gateway import CompletionGateway, SamplingConfig
from src.llms.providers import build_llm
from src.session.archiver import TranscriptArchiver
from src.session.facts import generate_hidden_facts
from src.session.session_manager import SERVER_ERROR_REPLY, SessionManager
from src.session.session_store import SessionStore

logger = logging.getLogger(__name__)

ARCHIVE_FAILED_MESSAGE = "Failed to save chat transcript."


def build_manager(settings: Settings) -> tuple[SessionManager, Dict[str, Any]]:
    """
    Wire the production collaborators:
    - Mongo transcripts collection (+ indexes)
    - completion provider selected by LLM_PROVIDER
    - session store, with hidden facts in the hidden_facts persona mode
    """
    handles = connect_mongo(
        settings.require_mongo_uri(),
        settings.mongo_db,
        collection=settings.transcripts_collection,
        tls=settings.mongo_tls,
    )
    ensure_indexes(handles)

    gateway = CompletionGateway(build_llm(settings), SamplingConfig.from_settings(settings))
    archiver = TranscriptArchiver(
        TranscriptRepo(handles["transcripts"]),
        mode=settings.archive_mode,
        persona_mode=settings.persona_mode,
    )
    facts_factory = generate_hidden_facts if settings.persona_mode == "hidden_facts" else None
    store = SessionStore(facts_factory=facts_factory)
    return SessionManager(store, gateway, archiver), dict(handles)


def typing_delay_s(reply: str, settings: Settings) -> float:
    ms = min(len(reply) * settings.typing_delay_ms_per_char, settings.typing_delay_max_ms)
    return ms / 1000.0


async def _sweep_idle(manager: SessionManager, settings: Settings) -> None:
    while True:
        await asyncio.sleep(settings.session_sweep_interval_s)
        try:
            expired = await asyncio.to_thread(manager.expire_idle, settings.session_idle_ttl_s)
        except Exception:
            logger.exception("idle session sweep failed")
            continue
        if expired:
            logger.info("idle sessions archived", extra={"count": len(expired)})


def get_manager(request: Request) -> SessionManager:
    return request.app.state.manager


def create_app(settings: Optional[Settings] = None, manager: Optional[SessionManager] = None) -> FastAPI:
    """
    Build the ASGI app. Passing `manager` skips Mongo/provider wiring.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        handles: Dict[str, Any] = {}
        if getattr(app.state, "manager", None) is None:
            app.state.manager, handles = build_manager(settings)
            logger.info(
                "backend ready",
                extra={
                    "provider": settings.llm_provider,
                    "model": settings.llm_model,
                    "persona_mode": settings.persona_mode,
                    "archive_mode": settings.archive_mode,
                },
            )

        sweeper: Optional[asyncio.Task] = None
        if settings.session_idle_ttl_s > 0:
            sweeper = asyncio.create_task(_sweep_idle(app.state.manager, settings))
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                with suppress(asyncio.CancelledError):
                    await sweeper
            client = handles.get("client")
            if client is not None:
                client.close()

    app = FastAPI(title="CSR Roleplay Chat Backend", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.manager = manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Malformed request body"})

    @app.exception_handler(InvalidRequestError)
    async def _invalid_request(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    # Sync handlers run in the threadpool: a caller disconnect does not
    # interrupt a turn that is already talking to the provider.
    @app.post("/chat")
    def chat(req: ChatRequest, mgr: SessionManager = Depends(get_manager)):
        try:
            result = mgr.chat(req.session_id, req.message)
        except InvalidRequestError:
            raise
        except Exception:
            logger.exception("Error in /chat", extra={"session_id": req.session_id})
            return JSONResponse(status_code=500, content={"reply": SERVER_ERROR_REPLY})

        delay = typing_delay_s(result.reply, settings)
        if delay > 0:
            time.sleep(delay)

        body = ChatResponse(reply=result.reply, session_id=result.session_id, turn=result.turn)
        return JSONResponse(status_code=200 if result.ok else 500, content=body.model_dump(by_alias=True))

    @app.post("/end-chat")
    def end_chat(req: EndChatRequest, mgr: SessionManager = Depends(get_manager)):
        try:
            result = mgr.end_session(req.session_id)
        except InvalidRequestError:
            raise
        except ArchiveError:
            logger.exception("Error in /end-chat", extra={"session_id": req.session_id})
            return JSONResponse(status_code=500, content={"message": ARCHIVE_FAILED_MESSAGE})
        except Exception:
            logger.exception("Unexpected error in /end-chat", extra={"session_id": req.session_id})
            return JSONResponse(status_code=500, content={"message": SERVER_ERROR_REPLY})

        message = "Chat transcript saved." if result.archived else "No active session; nothing to save."
        body = EndChatResponse(
            message=message,
            session_id=result.session_id,
            turns=result.turns,
            archived=result.archived,
        )
        return body.model_dump(by_alias=True)

    @app.get("/health")
    def health(mgr: SessionManager = Depends(get_manager)):
        return {"status": "ok", "activeSessions": mgr.active_sessions if mgr is not None else 0}

    return app


def main() -> None:
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level, json_lines=settings.log_json)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
