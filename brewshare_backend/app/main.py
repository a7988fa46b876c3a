# brewshare_backend/app/main.py  (backend entrypoint)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brewshare_backend.app.config import APP_ENV, CORS_ORIGINS
from brewshare_backend.app.routers import share
from brewshare_backend.app.utils.logs import get_logger

log = get_logger("main")

app = FastAPI(title="Brewshare API")

# --- CORS for the share/import UI --------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers under /api --------------------------------------------------------
app.include_router(share.router, prefix="/api")
log.info("mounted share router at /api/share (env=%s)", APP_ENV)

# --- Health --------------------------------------------------------------------
@app.get("/")
async def root():
    return {"ok": True, "service": "brewshare"}

@app.get("/health")
async def health():
    return {"ok": True}
