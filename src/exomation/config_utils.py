import json
import os
from typing import Any, Dict


def load_session_config(config_path: str = None) -> Dict[str, Any]:
    """Load tracking session config from JSON file."""
    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "session_config.json")
    with open(config_path, "r") as f:
        return json.load(f)
