"""
Modulo di configurazione per l'applicazione Flask.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Configurazione base, comune a tutti gli ambienti."""

    # Chiave segreta: in produzione deve essere sovrascritta da variabile d'ambiente
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # --- STORE LOCALE (SQLITE) -----------------------------------------------
    # Nessun server di riferimento: tutti i dati vivono in un unico file locale
    DATA_DIR = os.environ.get("DATA_DIR", str(BASE_DIR / "data"))
    DB_FILE_NAME = os.environ.get("DB_FILE_NAME", "locapilot.sqlite3")

    DEFAULT_DB_URL = f"sqlite:///{Path(DATA_DIR) / DB_FILE_NAME}"

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", DEFAULT_DB_URL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Applica le migrazioni pendenti all'avvio dell'app
    AUTO_MIGRATE = os.environ.get("AUTO_MIGRATE", "1") not in ("0", "false", "False")

    # Versione scritta nel campo "version" dei file di export
    EXPORT_FORMAT_VERSION = os.environ.get("EXPORT_FORMAT_VERSION", "1.0")

    # Limite massimo dimensione upload (documenti e file di import)
    MAX_CONTENT_LENGTH = 64 * 1024 * 1024

    # --- LOGGING -------------------------------------------------------------
    LOG_DIR = os.environ.get("LOG_DIR", str(BASE_DIR / "logs"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE_NAME = os.environ.get("LOG_FILE_NAME", "app.log")
    LOG_MAX_BYTES = int(os.environ.get("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.environ.get("LOG_BACKUP_COUNT", "3"))


class DevConfig(Config):
    """Configurazione per ambiente di sviluppo."""
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProdConfig(Config):
    """Configurazione per ambiente di produzione."""
    DEBUG = False
    ENV = "production"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    """Configurazione per i test: store in memoria."""
    TESTING = True
    DEBUG = False
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
    # Solo console
    LOG_DIR = None
