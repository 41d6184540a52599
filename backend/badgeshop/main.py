import os
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from badgeshop.api.health import router as health_router
from badgeshop.api.routes_auth import router as auth_router
from badgeshop.api.routes_barcode import router as barcode_router
from badgeshop.api.routes_catalogue import router as catalogue_router
from badgeshop.api.routes_chat import router as chat_router
from badgeshop.api.routes_checkout import router as checkout_router
from badgeshop.api.routes_images import router as images_router
from badgeshop.api.routes_orders import router as orders_router
from badgeshop.api.routes_users import router as users_router
from badgeshop.config import settings
from badgeshop.db import SessionLocal, init_db
from badgeshop.services.chat_service import purge_stale_sessions
from badgeshop.utils.log import get_logger

log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    init_db()

    # scheduler for abandoned chat-workflow sessions
    scheduler = BackgroundScheduler()

    def purge_job():
        db = SessionLocal()
        try:
            purge_stale_sessions(db)
        except Exception:
            log.exception("Chat session purge failed")
        finally:
            db.close()

    scheduler.add_job(
        purge_job, "interval", seconds=settings.CHAT_SESSION_SWEEP_SECONDS, id="purge_chat_sessions"
    )
    scheduler.start()

    try:
        yield
    finally:
        scheduler.shutdown(wait=False)


app = FastAPI(title="Fast ID Badges - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    body = dict(exc.detail) if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "fields": fields})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router, prefix="/api/products", tags=["catalogue"])

app.include_router(auth_router, prefix="/api", tags=["auth"])

app.include_router(users_router, prefix="/api", tags=["users"])

app.include_router(checkout_router, prefix="/api", tags=["checkout"])

app.include_router(orders_router, prefix="/api", tags=["orders"])

app.include_router(barcode_router, prefix="/api", tags=["barcode"])

app.include_router(chat_router, prefix="/api", tags=["chat"])

app.include_router(images_router, prefix="/api", tags=["images"])

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


def run():
    import uvicorn

    uvicorn.run("badgeshop.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
