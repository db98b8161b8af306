"""
Configuración de base de datos
"""
import logging

from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_db(app):
    """
    Inicializa la base con la app Flask y crea la tabla de pedidos si falta.

    El esquema no tiene migraciones: solo create_all.
    """
    db.init_app(app)

    with app.app_context():
        from . import models  # noqa: F401  registra las tablas

        db.create_all()
        logger.info("✅ Base de datos inicializada (%s)", ", ".join(sorted(db.metadata.tables)))
