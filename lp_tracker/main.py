from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lp_tracker.api.routers.positions import router as positions_router
from lp_tracker.api.routers.sync import router as sync_router

app = FastAPI(title="LP Tracker API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sync_router)
app.include_router(positions_router)
