import json
import yaml
import logging
from pydantic import ValidationError
from pathlib import Path
from pgmlgraph.config import Configuration, JSON
from typing import Optional


def load_config_file(path: str | Path) -> JSON:
    if isinstance(path, str):
        path = Path(path)
    with open(path, encoding="UTF-8") as file:
        if path.suffix in [".yaml", ".yml"]:
            loaded = yaml.safe_load(file)
        else:
            loaded = json.load(file)
    return loaded


def load_config(file_name: Optional[str | Path]) -> Configuration:
    """Load configuration from YAML or JSON file.

    :param file_name: path to the file, ``None`` gives default configuration
    :return: validated configuration
    :raises ValueError: when file content does not match configuration model
    """
    if file_name is None:
        return Configuration()
    try:
        return Configuration.model_validate(load_config_file(file_name) or {})
    except ValidationError as error:
        raise ValueError("Error parsing configuration file") from error


def load_owners(file_name: str | Path) -> dict:
    """Load owner registry (id to model object) from YAML or JSON mapping."""
    loaded = load_config_file(file_name)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Owner file {file_name} must contain a mapping")
    return {str(key): value for key, value in loaded.items()}


class LogFormatter(logging.Formatter):
    _grey = "\x1b[38;21m"
    _green = "\x1b[32m"
    _red = "\x1b[31;21m"
    _bold_red = "\x1b[31;1m"
    _yellow = "\u001b[33m"
    _blue = "\u001b[34m"
    _white = "\u001b[37m"
    _reset = "\x1b[0m"
    _bold = "\u001b[1m"
    _prefix = (
        _green
        + "%(asctime)s  "
        + _reset
        + _blue
        + "%(name)s "
        + _reset
        + _white
        + "%(funcName)s "
        + _reset
        + _bold
        + _grey
        + "%(levelname)s "
        + _reset
    )
    _message = "%(message)s"
    _formats = {
        logging.DEBUG: _prefix + _grey + _message + _reset,
        logging.INFO: _prefix + _white + _message + _reset,
        logging.WARNING: _prefix + _yellow + _message + _reset,
        logging.ERROR: _prefix + _red + _message + _reset,
        logging.CRITICAL: _prefix + _bold_red + _message + _reset,
    }

    def format(self, record):
        log_fmt = self._formats.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)
