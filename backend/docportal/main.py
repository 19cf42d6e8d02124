"""Ponto de entrada FastAPI. Registra middleware, tratadores de erro e routers da API."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from docportal.config import settings
from docportal.database import Base, engine
from docportal.logging_config import setup_logging
from docportal.middleware.error_handlers import register_exception_handlers
import docportal.models  # noqa: F401 - registra as tabelas no metadata
from docportal.routers import auth, categories, dashboard, documents, profile, users

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Portal de Documentos",
    description="Gestão de documentos com fluxo de aprovação por papéis (Analista, Coordenador, Gerente)",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(documents.router)
app.include_router(categories.router)
app.include_router(dashboard.router)
app.include_router(users.router)
app.include_router(profile.router)


@app.on_event("startup")
def on_startup():
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("schema ensured on %s", engine.url.render_as_string(hide_password=True))


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Portal de Documentos"}
