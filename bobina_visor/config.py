"""
Configuration for Bobina Visor.

Runtime settings come from environment variables. Business rules
(required columns, filter literals, preferred widths) are fixed
constants - edit the code, not the environment, to change them.
"""
import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    # Default snapshot folder when none is given on the command line
    DATA_DIR: str = os.environ.get("BOBINA_DATA_DIR", ".")

    # Days kept in the history view (0 = unlimited)
    MAX_DAYS: int = int(os.environ.get("BOBINA_MAX_DAYS", "5"))

    # Thread pool size for per-file history analysis
    MAX_WORKERS: int = int(os.environ.get("BOBINA_MAX_WORKERS", "0")) or (os.cpu_count() or 1)

    LOG_LEVEL: str = os.environ.get("BOBINA_LOG_LEVEL", "INFO")

    # Seconds to wait after a filesystem event before recomputing
    WATCH_DEBOUNCE: float = float(os.environ.get("BOBINA_WATCH_DEBOUNCE", "1.0"))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()


# =============================================================================
# Business constants
# =============================================================================

REQUIRED_COLUMNS = (
    "ROLL_ID",
    "PAPER_CODE",
    "WIDTH",
    "ESTADO",
    "COMPLETA",
    "LOCATION",
    "DEPO",
)

# Columns kept on rows of the live inventory view
OUTPUT_COLUMNS = ("ROLL_ID", "PAPER_CODE", "WIDTH", "ESTADO", "COMPLETA")

EXCLUDED_LOCATIONS = frozenset({"ULOG", "DPBQ"})
STOCK_STATE = "STOCK"
PLANT_DEPOT = "PLANTA SFM"

# Widths shown first inside each paper code group
PREFERRED_WIDTHS = ("1930", "2100", "2250", "2350", "2450")

MISSING_PAPER_CODE_LABEL = "Sin código"


# =============================================================================
# User-facing messages
# =============================================================================

MSG_INVENTORY_ERROR = "Error al cargar los datos"
MSG_FOLDER_ERROR = "No se pudo leer la carpeta seleccionada"
MSG_HISTORY_ERROR = "No se pudo calcular el histórico"
MSG_NO_DATA = "No se encontraron datos."
MSG_NO_SNAPSHOT = "No se encontró ningún archivo CSV con formato YYYYMMDD-HHMMSS.csv"
MSG_MISSING_COLUMNS = "El archivo CSV no contiene todas las columnas requeridas."
