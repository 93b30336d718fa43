import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from taixiu_ensemble.api.routes import router
from taixiu_ensemble.config import settings
from taixiu_ensemble.scoreboard import Scoreboard
from taixiu_ensemble.services import KeepAlive

logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(levelname)s - %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    keepalive = None
    if settings.keepalive_url:
        keepalive = KeepAlive(settings.keepalive_url, settings.keepalive_interval)
        keepalive.start()
    yield
    if keepalive is not None:
        keepalive.stop()


def create_app(scoreboard: Scoreboard | None = None) -> FastAPI:
    app = FastAPI(title="TaiXiu Ensemble", lifespan=lifespan)
    app.state.scoreboard = scoreboard or Scoreboard(max_entries=settings.scoreboard_size)
    app.include_router(router)

    @app.get("/")
    def home():
        return {"ok": True, "app": "TaiXiu Ensemble", "predict": "/predict-tai-xiu"}

    return app


app = create_app()
