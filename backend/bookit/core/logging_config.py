"""Configuration du système de logging centralisé."""

import json
import logging
import logging.handlers
import re
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from bson import ObjectId

from bookit.core.settings import get_settings

_DATE_IN_NAME = re.compile(r"(\d{4}-\d{2}-\d{2})")


class CustomJSONEncoder(json.JSONEncoder):
    """Encodeur JSON personnalisé pour gérer ObjectId, datetime et enums."""

    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        elif isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class DataLogger:
    """Logger spécialisé pour les données lourdes en JSON."""

    def __init__(self, logs_dir: str = "logs"):
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_data(
        self,
        calling_context: str,
        data: Dict[str, Any],
        user_data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log des données lourdes en JSON.

        Description:
            Ajoute une entrée au fichier `<date>-data.json` du jour. Le fichier reste un
            tableau JSON valide après chaque ajout.

        Args:
            calling_context (str): Contexte appelant (ex. "challenge_refresh").
            data (dict): Données à tracer.
            user_data (dict | None): Données utilisateur (id, ip...).
        """
        today = datetime.now().strftime("%Y-%m-%d")
        json_file = self.logs_dir / f"{today}-data.json"

        entry = {
            "datetime": datetime.now().isoformat(),
            "calling_context": calling_context,
            "user_data": user_data or {},
            "data": data
        }
        serialized = json.dumps(entry, cls=CustomJSONEncoder)

        if json_file.exists():
            content = json_file.read_text(encoding="utf-8").rstrip()
            if content.endswith("]"):
                content = content[:-1].rstrip()
            if content.endswith("}"):
                content += ","
            json_file.write_text(content + serialized + "]", encoding="utf-8")
        else:
            json_file.write_text("[" + serialized + "]", encoding="utf-8")


_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_logger(name: str, level: int, path: Path) -> logging.Logger:
    """Logger `name` écrivant dans `path`, rotation à minuit (suffixe daté)."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:  # setup_logging peut être rappelé
        handler = logging.handlers.TimedRotatingFileHandler(
            filename=path, when="midnight", interval=1, encoding="utf-8"
        )
        handler.suffix = "%Y-%m-%d"
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def setup_logging(
    logs_dir: str = "logs", retention_days: int = 30
) -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Configure le système de logging avec rotation quotidienne.

    Description:
        - `bookit.generic` (INFO+) → generic.log
        - `bookit.errors` (ERROR+) → errors.log
        - DataLogger → `<date>-data.json`
        Les fichiers plus vieux que `retention_days` sont supprimés au passage.

    Returns:
        tuple: (logger_generic, logger_errors, data_logger)
    """
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)
    cleanup_old_logs(logs_path, retention_days)

    generic_logger = _file_logger("bookit.generic", logging.INFO, logs_path / "generic.log")
    error_logger = _file_logger("bookit.errors", logging.ERROR, logs_path / "errors.log")

    return generic_logger, error_logger, DataLogger(str(logs_path))


def cleanup_old_logs(logs_dir: Path, retention_days: int = 30) -> None:
    """Supprime les logs dont la date (dans le nom de fichier) dépasse retention_days."""
    cutoff_str = (datetime.now() - timedelta(days=retention_days)).strftime("%Y-%m-%d")

    patterns = ["*-data.json", "generic.log.*", "errors.log.*"]

    for pattern in patterns:
        for file_path in logs_dir.glob(pattern):
            match = _DATE_IN_NAME.search(file_path.name)
            if not match or match.group(1) >= cutoff_str:
                continue
            try:
                file_path.unlink()
            except OSError:
                continue


# Instance globale (lazy initialization)
_loggers: Optional[tuple[logging.Logger, logging.Logger, DataLogger]] = None


def get_loggers() -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Retourne les loggers configurés (singleton)."""
    global _loggers
    if _loggers is None:
        settings = get_settings()
        _loggers = setup_logging(settings.logs_dir, settings.log_retention_days)
    return _loggers


def extract_user_data(user_id: Optional[str] = None, request=None) -> Dict[str, Any]:
    """Extrait les données utilisateur pour le logging."""
    user_data: Dict[str, Any] = {}

    if user_id:
        user_data["user_id"] = user_id

    if request:
        # IP depuis FastAPI request
        if hasattr(request, 'client') and request.client:
            user_data["ip"] = request.client.host

        if hasattr(request, 'headers'):
            user_agent = request.headers.get("user-agent")
            if user_agent:
                user_data["user_agent"] = user_agent

    return user_data
