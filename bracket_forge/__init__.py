"""FORGE: soporte paramétrico para fuentes de alimentación (PSU), listo para imprimir."""
import logging

from . import config

__version__ = "0.3.0"

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())
if config.DEBUG:
    _log.setLevel(logging.DEBUG)
