"""FastAPI server for lyrics segmentation, translation and saved translations

Endpoints:
- POST   /api/translate                  Segment + translate pasted lyrics
- GET    /api/translations               List the caller's saved translations
- POST   /api/translations               Save a translation
- GET    /api/translations/{id}          Fetch one saved translation
- PUT    /api/translations/{id}          Overwrite-save (partial update)
- PATCH  /api/translations/{id}/title    Rename
- DELETE /api/translations/{id}          Delete
- GET    /health                         Liveness + configured model

Identity comes from the ``X-User-Id`` header set by the authenticating proxy
in front of this service.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import (
    InvalidInputError,
    ModelResponseMalformedError,
    NotFoundError,
    PersistenceError,
    PersistenceValidationError,
    SongLensError,
    TranslationCallFailedError,
    UnauthorizedError,
)
from .storage import TranslationDraft, TranslationPatch, TranslationStore
from .translators import LyricsPipelineAgent, PipelineConfig

logger = logging.getLogger("songlens")

DB_PATH = os.getenv("SONGLENS_DB_PATH", "data/songlens.db")


class TranslateRequest(BaseModel):
    lyrics: Optional[str] = None


class RenameRequest(BaseModel):
    title: str


def error_body(
    error: str, details: Optional[str] = None, raw_response: Optional[str] = None
) -> dict:
    """JSON error envelope shared by every endpoint"""
    body = {"error": error}
    if details:
        body["details"] = details
    if raw_response:
        body["rawResponse"] = raw_response
    return body


def error_response(exc: SongLensError) -> JSONResponse:
    """Map a tagged songlens error to an HTTP response"""
    if isinstance(exc, InvalidInputError):
        return JSONResponse(status_code=400, content=error_body(exc.message, exc.details))
    if isinstance(exc, ModelResponseMalformedError):
        details = f"{exc.message}: {exc.details}" if exc.details else exc.message
        return JSONResponse(
            status_code=500,
            content=error_body("Failed to translate lyrics", details, exc.raw_response),
        )
    if isinstance(exc, TranslationCallFailedError):
        details = f"{exc.message}: {exc.details}" if exc.details else exc.message
        return JSONResponse(
            status_code=502, content=error_body("Failed to translate lyrics", details)
        )
    if isinstance(exc, NotFoundError):
        return JSONResponse(status_code=404, content=error_body(exc.kind, exc.message))
    if isinstance(exc, UnauthorizedError):
        return JSONResponse(status_code=403, content=error_body(exc.kind, exc.message))
    if isinstance(exc, PersistenceValidationError):
        return JSONResponse(status_code=422, content=error_body(exc.code, exc.message))
    if isinstance(exc, PersistenceError):
        return JSONResponse(
            status_code=500, content=error_body("Storage operation failed", exc.details)
        )
    return JSONResponse(status_code=500, content=error_body(exc.message, exc.details))


async def current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Stable identifier of the authenticated caller"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(401, "Authentication required")
    return x_user_id.strip()


def get_agent(request: Request) -> LyricsPipelineAgent:
    return request.app.state.agent


def get_store(request: Request) -> TranslationStore:
    return request.app.state.store


def create_app(
    agent: Optional[LyricsPipelineAgent] = None,
    store: Optional[TranslationStore] = None,
) -> FastAPI:
    """Build the FastAPI app

    Args:
        agent: Pipeline agent (built from environment config if None)
        store: Translation store (SQLite at SONGLENS_DB_PATH if None)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.agent is None:
            app.state.agent = LyricsPipelineAgent(PipelineConfig.from_env())
        if app.state.store is None:
            os.makedirs(os.path.dirname(DB_PATH) or ".", exist_ok=True)
            app.state.store = TranslationStore(DB_PATH)
        await app.state.store.init()
        logger.info(f"songlens started (model={app.state.agent.config.model})")
        yield

    app = FastAPI(title="songlens", version="0.1.0", lifespan=lifespan)
    app.state.agent = agent
    app.state.store = store

    @app.exception_handler(SongLensError)
    async def handle_songlens_error(request: Request, exc: SongLensError):
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return JSONResponse(status_code=405, content=error_body("Method not allowed"))
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400, content=error_body("Invalid request", str(exc.errors()))
        )

    @app.get("/health")
    async def health(agent: LyricsPipelineAgent = Depends(get_agent)):
        """Service health + configured model."""
        return {
            "status": "ok",
            "provider": agent.config.provider,
            "model": agent.config.model,
        }

    @app.post("/api/translate")
    async def translate(
        body: Optional[TranslateRequest] = None,
        agent: LyricsPipelineAgent = Depends(get_agent),
    ):
        """Segment lyrics and translate every section."""
        try:
            sections = await agent.run(body.lyrics if body else None)
        except SongLensError as e:
            if not isinstance(e, InvalidInputError):
                logger.error(f"Translation error ({e.kind}): {e.message}")
            return error_response(e)
        except Exception as e:
            logger.exception("Translation error")
            return JSONResponse(
                status_code=500,
                content=error_body("Failed to translate lyrics", str(e)),
            )
        return {"sections": [s.model_dump(by_alias=True) for s in sections]}

    @app.get("/api/translations")
    async def list_translations(
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        """List the caller's translations, newest first."""
        records = await store.list(user_id)
        return [r.model_dump(by_alias=True) for r in records]

    @app.post("/api/translations", status_code=201)
    async def create_translation(
        draft: TranslationDraft,
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        """Save a new translation."""
        translation_id = await store.create(user_id, draft)
        return {"id": translation_id}

    @app.get("/api/translations/{translation_id}")
    async def get_translation(
        translation_id: str,
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        record = await store.get(translation_id, user_id)
        return record.model_dump(by_alias=True)

    @app.put("/api/translations/{translation_id}")
    async def update_translation(
        translation_id: str,
        patch: TranslationPatch,
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        """Overwrite the supplied fields of a saved translation."""
        record = await store.update(translation_id, user_id, patch)
        return record.model_dump(by_alias=True)

    @app.patch("/api/translations/{translation_id}/title")
    async def rename_translation(
        translation_id: str,
        body: RenameRequest,
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        record = await store.rename(translation_id, user_id, body.title)
        return record.model_dump(by_alias=True)

    @app.delete("/api/translations/{translation_id}")
    async def delete_translation(
        translation_id: str,
        user_id: str = Depends(current_user),
        store: TranslationStore = Depends(get_store),
    ):
        await store.delete(translation_id, user_id)
        return {"deleted": translation_id}

    return app


def main():
    """Run the API server with uvicorn."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        create_app(),
        host=os.getenv("SONGLENS_HOST", "127.0.0.1"),
        port=int(os.getenv("SONGLENS_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
