from fastapi import FastAPI

from spotauth.api.auth.routes import router as auth_router
from spotauth.core import configure_logging

configure_logging()

app = FastAPI(
    title="Spotify Auth API",
    version="0.1.0",
    description="Local Spotify login (loopback redirect) and token refresh.",
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(auth_router, prefix="/auth", tags=["auth"])
