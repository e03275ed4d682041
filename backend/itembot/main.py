import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from itembot.config import settings
from itembot.core.bootstrap import initialize_db
from itembot.core.db import close_db, init_db

from itembot.api.v1.routers import admin, auth, content, generation

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    store = init_db()
    # Heal the admin/demo accounts before anything else touches the store
    state = initialize_db(store)
    logger.info("[startup] Store ready at %s (%d users)", settings.storage_dir, len(state.users))

@app.on_event("shutdown")
async def on_shutdown():
    close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")
app.include_router(content.router, prefix="/api/v1")
app.include_router(generation.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
