import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studio.routes import bookings, clients, reports, snapshot, staff


def create_app() -> FastAPI:
    app = FastAPI(title="Studio Operations API", version="0.1.0")

    level = os.getenv("STUDIO_LOG_LEVEL")
    if level:
        logging.getLogger("studio").setLevel(level.upper())

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:5173", "http://127.0.0.1:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(snapshot.router, prefix="/api")
    app.include_router(bookings.router, prefix="/api")
    app.include_router(staff.router, prefix="/api")
    app.include_router(clients.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Studio Operations API",
                "docs": "/docs",
                "health": "/api/bookings",
            }
        )

    return app


app = create_app()
