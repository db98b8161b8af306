"""
Configuración de la aplicación
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Directorio base del proyecto
BASE_DIR = Path(__file__).resolve().parent.parent

# Cargar .env desde el directorio del proyecto
load_dotenv(BASE_DIR / '.env')

DEFAULT_KITCHEN_WEBHOOK_URL = "https://n8nwebhookx.botec.tech/webhook/crearFacturaCocina"
DEFAULT_CASHIER_WEBHOOK_URL = "https://n8nwebhookx.botec.tech/webhook/crearFacturaCaja"


class Config:
    """Configuración base"""

    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    TESTING = False

    # Database con path absoluto
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or f"sqlite:///{BASE_DIR}/instance/pedidos.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Impresoras (automatizaciones externas que reciben el ticket)
    KITCHEN_WEBHOOK_URL = os.getenv("KITCHEN_WEBHOOK_URL", DEFAULT_KITCHEN_WEBHOOK_URL)
    CASHIER_WEBHOOK_URL = os.getenv("CASHIER_WEBHOOK_URL", DEFAULT_CASHIER_WEBHOOK_URL)
    WEBHOOK_TIMEOUT_SECONDS = float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10"))

    # Reglas del negocio
    DELETE_GRACE_MINUTES = int(os.getenv("DELETE_GRACE_MINUTES", "15"))
    LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "America/Argentina/Buenos_Aires")

    # CORS
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Configuración de desarrollo"""
    DEBUG = True


class ProductionConfig(Config):
    """Configuración de producción"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Configuración para la suite de tests"""
    TESTING = True
    DEBUG = False
    FLASK_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    KITCHEN_WEBHOOK_URL = "http://printers.test/cocina"
    CASHIER_WEBHOOK_URL = "http://printers.test/caja"
    WEBHOOK_TIMEOUT_SECONDS = 1.0
    DELETE_GRACE_MINUTES = 15
    LOCAL_TIMEZONE = "America/Argentina/Buenos_Aires"


# Mapeo de configuraciones
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    """Obtiene la configuración según el entorno"""
    env = name or os.getenv("FLASK_ENV", "development")
    return config_by_name.get(env, DevelopmentConfig)
