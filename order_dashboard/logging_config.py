"""
Configuración de logging del backend de pedidos.

Uso:
    from order_dashboard.logging_config import setup_logging
    setup_logging()  # una vez, al arrancar la app

Variables de entorno:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR o CRITICAL (por defecto INFO)
"""
import logging
import os
import sys

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str = None) -> None:
    """
    Configura el logging de la aplicación.

    Args:
        level: nivel como string. Si no se indica se lee LOG_LEVEL;
               cualquier valor inválido cae a INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = (level or "INFO").upper()

    if level not in VALID_LEVELS:
        level = "INFO"

    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("order_dashboard").setLevel(numeric_level)

    # Menos ruido de librerías externas fuera de DEBUG
    if level != "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configurado en nivel %s", level)
