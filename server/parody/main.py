import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from parody.config import settings
from parody.errors import ParodyError
from parody.api import instrumental, lyrics, music, pipeline, rewrite
from parody.services import pipeline as pipeline_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    yield
    # Stop any background poll loop and release HTTP clients on shutdown
    if pipeline_service.pipeline_session is not None:
        await pipeline_service.pipeline_session.close()


app = FastAPI(
    title="Song Parody API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ParodyError)
async def parody_error_handler(_request: Request, exc: ParodyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# Frontend-facing routes keep their original root paths
app.include_router(lyrics.router, tags=["lyrics"])
app.include_router(instrumental.router, tags=["instrumental"])
app.include_router(rewrite.router, tags=["parody"])
app.include_router(music.router, tags=["music"])
app.include_router(pipeline.router, prefix="/api/pipeline", tags=["pipeline"])


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}
