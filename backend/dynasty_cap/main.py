from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dynasty_cap.api.routes import router
from dynasty_cap.core.config import settings
from dynasty_cap.core.logging import configure_logging
from dynasty_cap.db.session import init_db

configure_logging(settings.log_level)

app = FastAPI(title=settings.project_name, version=settings.version)

# Create tables that might be missing (no migrations for the SQLite workflow).
init_db()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
