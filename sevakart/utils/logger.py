import logging
import json
import os
from pathlib import Path
import threading


ROOT_LOGGER_NAME = "sevakart"

# JSON key -> LogRecord attribute
LOG_FIELDS = {
    "time": "asctime",
    "level": "levelname",
    "logger": "name",
    "module": "module",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}


class SingletonLogger:
    """
    Owns the "sevakart" logger and attaches its handlers once per process.
    Every `get_logger("sevakart.<area>")` call returns a child of it.
    """
    _instance = None
    _lock = threading.Lock()
    _logger = None

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SingletonLogger, cls).__new__(cls)
        return cls._instance

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        if self._logger is None:
            with self._lock:
                if self._logger is None:
                    self._logger = self._build_root()
        if name.startswith(ROOT_LOGGER_NAME + "."):
            return self._logger.getChild(name[len(ROOT_LOGGER_NAME) + 1:])
        return self._logger

    @staticmethod
    def _build_root() -> logging.Logger:
        """
        sevakart.log receives INFO and above, errors.log ERROR and above,
        the console everything. Both files are truncated on startup.
        """
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.handlers.clear()

        formatter = JsonFormatter(LOG_FIELDS)
        log_dir = Path(os.environ.get("SEVAKART_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)

        handlers = [
            (logging.FileHandler(log_dir / "sevakart.log", mode='w', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(log_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), logging.DEBUG),
        ]
        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger


class JsonFormatter(logging.Formatter):
    """
    Render each LogRecord as one JSON object per line.

    Args:
        fields (dict): JSON key -> LogRecord attribute name
        time_format (str): strftime format for "asctime"
    """
    def __init__(self, fields: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S"):
        super().__init__()
        self.fields = fields if fields is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = "%s.%03dZ"

    def usesTime(self) -> bool:
        return "asctime" in self.fields.values()

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record)

        entry = {key: getattr(record, attr) for key, attr in self.fields.items()}

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger backed by the singleton handlers.

    Args:
        name (str): Dotted logger name, e.g. "sevakart.buisness.ordering"

    Returns:
        logging.Logger: Logger instance
    """
    return SingletonLogger().get_logger(name)
