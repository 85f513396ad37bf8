# bracket_forge/asgi.py
"""
ASGI entrypoint para Uvicorn.

Exportamos tanto `fastapi_app` como `app` para que funcionen
indistintamente los comandos:
  - uvicorn bracket_forge.asgi:fastapi_app ...
  - uvicorn bracket_forge.asgi:app ...
"""
import logging

from .config import DEBUG

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

from .app import app as fastapi_app  # noqa: E402

app = fastapi_app
