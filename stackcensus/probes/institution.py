"""Reader for the access point's institution metadata.

The access point client writes generatedApClientConfiguration-*.json files
into <base>/Share/conf. The newest one describes the institution this
server belongs to. The result is informational and is never merged into
the version report.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..utils.constants import INSTITUTION_CONFIG_GLOB, SHARE_CONF_DIR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstitutionRecord:
    identifier: Optional[str]
    country_code: Optional[str]
    name: Optional[str]
    email: Optional[str] = None


def find_latest_config(conf_dir: Path) -> Optional[Path]:
    """Return the most recently modified client configuration file."""
    if not conf_dir.is_dir():
        return None
    candidates = [p for p in conf_dir.glob(INSTITUTION_CONFIG_GLOB) if p.is_file()]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.stat().st_mtime)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_institution(data: dict[str, Any]) -> InstitutionRecord:
    """Project the client configuration onto an InstitutionRecord.

    The participant identifier carries a scheme prefix
    ("0192:991825827"); only the part after the last colon is kept.
    """
    participant = _text(data.get("participantId"))
    identifier = participant.rsplit(":", 1)[-1] if participant else None
    return InstitutionRecord(
        identifier=identifier,
        country_code=_text(data.get("countryCode")),
        name=_text(data.get("name")),
    )


def scan(base_path: str) -> Optional[InstitutionRecord]:
    conf_dir = Path(base_path, *SHARE_CONF_DIR)
    try:
        latest = find_latest_config(conf_dir)
    except OSError as e:
        logger.warning("Could not list %s: %s", conf_dir, e)
        return None

    if latest is None:
        logger.info("No %s in %s", INSTITUTION_CONFIG_GLOB, conf_dir)
        return None

    try:
        with open(latest, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read institution metadata from %s: %s", latest, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Institution metadata in %s is not a JSON object", latest)
        return None

    return parse_institution(data)
