"""
Client profile configuration loaded from JSON.

Expected document shape::

    {
        "billing": {
            "base_url": "https://billing.local/api/",
            "timeout": 30,
            "headers": {"Accept": "application/json"},
            "limit": 10,
            "certificate": {"cert_file": "client.pem", "verify": false}
        }
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

from .types import ClientCertificate
from .types import ClientProfile

logger = logging.getLogger(__name__)


def profile_from_mapping(name: str, data: dict[str, Any]) -> ClientProfile:
    """Build a ClientProfile from one entry of the profiles document."""
    values = dict(data)
    values.pop("name", None)
    certificate = values.pop("certificate", None)
    return ClientProfile(
        name=name,
        certificate=ClientCertificate.from_mapping(certificate) if certificate else None,
        **values,
    )


def load_profiles(path: Path | str) -> dict[str, ClientProfile]:
    """
    Load client profiles from a JSON file.

    Args:
        path: Path to the profiles file

    Returns:
        Profiles keyed by name

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or an entry is malformed
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Client profiles file not found at {config_path}")

    try:
        raw_profiles = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in client profiles file: {e}") from e

    if not isinstance(raw_profiles, dict):
        raise ValueError("Client profiles file must contain a JSON object keyed by profile name")

    profiles: dict[str, ClientProfile] = {}
    for name, entry in raw_profiles.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Client profile '{name}' must be a JSON object")
        try:
            profiles[name] = profile_from_mapping(name, entry)
        except TypeError as e:
            raise ValueError(f"Invalid client profile '{name}': {e}") from e

    logger.debug(f"Loaded {len(profiles)} client profile(s) from {config_path}")
    return profiles
