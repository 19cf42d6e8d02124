"""Configuração de logging estruturado (JSON) para o serviço."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from docportal.config import settings


def setup_logging() -> None:
    handler = logging.StreamHandler(sys.stdout)

    if settings.LOG_JSON:
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG and settings.LOG_LEVEL == "DEBUG" else logging.WARNING
    )
