from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from eduplatform.core.logging import setup_logging, RequestIDMiddleware
from eduplatform.core.config import settings
from eduplatform.db import dispose_engine, get_engine, get_session


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # fail fast: a missing DATABASE_URL stops startup here
    get_engine()
    yield
    await dispose_engine()


app = FastAPI(title="EduPlatform API", version="1.0.0", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)

# dev router only if explicitly enabled
if settings.ENABLE_DEBUG_ENDPOINTS:
    from eduplatform.routers import dev_router
    app.include_router(dev_router)


@app.get("/healthz")
def health():
    return {"status": "ok"}


@app.get("/healthz/db")
async def health_db(session: AsyncSession = Depends(get_session)):
    await session.execute(text("SELECT 1"))
    return {"db": "ok"}
