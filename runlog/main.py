from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import engine
from . import models
from .logger import setup_logger
from .routers.activities import router as activities_router
from .routers.training_blocks import router as training_blocks_router
from .routers.weekly import router as weekly_router

setup_logger(settings.LOG_LEVEL, settings.LOG_FILE)
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Runlog API")
app.include_router(activities_router)
app.include_router(training_blocks_router)
app.include_router(weekly_router)

app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])

@app.get("/health")
async def health():
    return {"status": "ok"}
