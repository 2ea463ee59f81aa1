import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from .shared.config import settings
from .auth.router import router as auth_router
from .articles.router import router as articles_router
from .blocks.router import router as blocks_router
from .quotes.router import router as quotes_router
from .sales_opportunities.router import router as sales_router
from .locks.router import router as locks_router, lock_routers
from .locks.errors import EditLockError, LockConflict, ResourceNotFound, UnlockForbidden

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quote Portal API", version="0.1.0", openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# one handler per lock error kind
@app.exception_handler(ResourceNotFound)
def not_found_handler(request: Request, exc: ResourceNotFound):
    return JSONResponse(status_code=404, content=exc.to_payload())


@app.exception_handler(EditLockError)
def edit_lock_handler(request: Request, exc: EditLockError):
    return JSONResponse(status_code=409, content=exc.to_payload())


@app.exception_handler(LockConflict)
def lock_conflict_handler(request: Request, exc: LockConflict):
    return JSONResponse(status_code=409, content=exc.to_payload())


@app.exception_handler(UnlockForbidden)
def unlock_forbidden_handler(request: Request, exc: UnlockForbidden):
    return JSONResponse(status_code=403, content=exc.to_payload())


@app.exception_handler(HTTPException)
def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers
    )


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get(f"{settings.API_PREFIX}/healthz")
def healthz():
    return {"status": "ok", "app": "Quote Portal"}


app.include_router(auth_router)
app.include_router(articles_router)
app.include_router(blocks_router)
app.include_router(quotes_router)
app.include_router(sales_router)
app.include_router(locks_router)
for lock_router in lock_routers:
    app.include_router(lock_router)
