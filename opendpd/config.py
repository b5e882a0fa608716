import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from opendpd.errors import InvalidArgument

DEFAULT_BASE_URL = "https://www.dallasopendata.com/resource"
DEFAULT_USER_AGENT = "opendpd/0.1.0 (https://github.com/Steal-This-Code/opendpd)"
DEFAULT_TZ = "America/Chicago"
MAX_PAGE_SIZE = 1000


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    load_dotenv()
    path = path or os.getenv("OPENDPD_CONFIG")
    cfg: Dict[str, Any] = {}
    if path:
        cfg_path = Path(path).resolve()
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config not found: {cfg_path}")
        with cfg_path.open("r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    cfg.setdefault("api", {})
    cfg.setdefault("cleaning", {})

    cfg["api"].setdefault("base_url", DEFAULT_BASE_URL)
    cfg["api"].setdefault("user_agent", DEFAULT_USER_AGENT)
    cfg["api"].setdefault("page_size", MAX_PAGE_SIZE)
    cfg["api"].setdefault("timeout", None)
    cfg["api"].setdefault("retries", 0)
    cfg["cleaning"].setdefault("tz", DEFAULT_TZ)

    if os.getenv("OPENDPD_BASE_URL"):
        cfg["api"]["base_url"] = os.getenv("OPENDPD_BASE_URL")
    if os.getenv("OPENDPD_USER_AGENT"):
        cfg["api"]["user_agent"] = os.getenv("OPENDPD_USER_AGENT")
    if os.getenv("OPENDPD_TIMEOUT"):
        cfg["api"]["timeout"] = float(os.getenv("OPENDPD_TIMEOUT", ""))

    cfg["api"]["base_url"] = str(cfg["api"]["base_url"]).rstrip("/")
    page_size = cfg["api"]["page_size"]
    if isinstance(page_size, bool) or not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InvalidArgument(f"api.page_size must be an integer between 1 and {MAX_PAGE_SIZE}, got {page_size!r}")

    return cfg


def resource_url(cfg: Dict[str, Any], resource_id: str) -> str:
    return f"{cfg['api']['base_url']}/{resource_id}.json"
