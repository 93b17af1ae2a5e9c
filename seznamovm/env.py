import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULTS = {
    "SEZNAMOVM_REGISTRY_URL": "https://www.czechpoint.cz/spravadat/ovm/datafile.do?format=xml&service=seznamovm",
    "SEZNAMOVM_WIKI_API_URL": "https://cs.wikipedia.org/w/api.php",
    "SEZNAMOVM_HTTP_TIMEOUT": "20",
    "SEZNAMOVM_LOG_LEVEL": "INFO",
    "SEZNAMOVM_DB": "data/seznamovm.db",
}


def load_env() -> None:
    """Load .env from project root if present.
    Values already set in the environment win over the file.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_setting(name: str, default: Optional[str] = None) -> str:
    value = os.getenv(name)
    if value:
        return value
    if default is not None:
        return default
    if name not in DEFAULTS:
        raise KeyError(f"Unknown setting: {name}")
    return DEFAULTS[name]


def http_timeout() -> float:
    return float(get_setting("SEZNAMOVM_HTTP_TIMEOUT"))
