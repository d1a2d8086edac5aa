# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Your configuration and DB
from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import register_error_handlers

from app.api.v1.routers import auth, todos

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error envelope: {"error": "..."} for every failure
register_error_handlers(app)

@app.on_event("startup")
async def on_startup():
    await init_db()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(todos.router, prefix=settings.API_PREFIX)

@app.get("/healthz")
def healthz():
    return {"ok": True}
