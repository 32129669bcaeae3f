# src/courier_match/io/config.py
import json
import os

from courier_match.config.models import EngineModel


def load_config(path: str) -> EngineModel:
    """Read a JSON engine config; missing sections fall back to defaults."""
    path = os.path.expandvars(os.path.expanduser(path))
    with open(path, encoding="utf-8") as f:
        return EngineModel.model_validate(json.load(f))
