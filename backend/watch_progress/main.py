from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from watch_progress.core.config import settings
from watch_progress.core.logging_config import configure_logging
from watch_progress.core import dependencies
from watch_progress.api import progress as progress_router
from watch_progress.api import sessions as sessions_router
from watch_progress.api import videos as videos_router
from watch_progress.api import version as version_router
from watch_progress.services.progress_store import ProgressStore
from watch_progress.services.sessions import SessionRegistry

_log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the progress store and session registry for the app's lifetime.

    Persisted progress is loaded once at startup. On shutdown every open
    session is closed so trailing watched spans and positions are kept.
    """
    configure_logging(settings.log_level)
    for line in settings.diagnostics or []:
        _log.debug("[config] %s", line)

    store = ProgressStore(dependencies.build_kv_store(settings), storage_key=settings.storage_key)
    store.load_from_storage()
    sessions = SessionRegistry(store)
    dependencies.configure(store, sessions)
    _log.info("watch progress ready storage=%s videos=%d", settings.storage_backend, len(store))

    yield

    sessions.close_all()
    dependencies.reset()


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    try:
        body = await request.body()
    except Exception:
        body = b''
    _log.warning("validation error url=%s body=%s errors=%s", request.url, body.decode(errors='replace'), exc.errors())
    return JSONResponse(status_code=422, content={'detail': exc.errors()})


# Routers
app.include_router(progress_router.router, prefix=settings.api_v1_prefix)
app.include_router(sessions_router.router, prefix=settings.api_v1_prefix)
app.include_router(videos_router.router, prefix=settings.api_v1_prefix)
app.include_router(version_router.router, prefix=settings.api_v1_prefix)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

@app.get('/')
async def root():
    return {'status': 'ok', 'app': settings.app_name}
