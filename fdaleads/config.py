"""
Configuration module for the FDA lead generation backend.
"""
import os
from typing import Any, Dict

from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env file
load_dotenv()

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes")

# Upstream APIs
OPENFDA_BASE_URL = os.getenv("OPENFDA_BASE_URL", "https://api.fda.gov")
CTGOV_BASE_URL = os.getenv("CTGOV_BASE_URL", "https://clinicaltrials.gov/api/v2")

# Request timeouts in seconds
FDA_TIMEOUT = float(os.getenv("FDA_TIMEOUT", "30"))
CTGOV_TIMEOUT = float(os.getenv("CTGOV_TIMEOUT", "45"))

# Feature Flags
# Offline mode never touches the network and serves the built-in sample records
OFFLINE_MODE = os.getenv("OFFLINE_MODE", "false").lower() in ("true", "1", "yes")
ENABLE_SAMPLE_FALLBACK = os.getenv("ENABLE_SAMPLE_FALLBACK", "true").lower() in ("true", "1", "yes")
AUTO_GENERATE_ON_STARTUP = os.getenv("AUTO_GENERATE_ON_STARTUP", "true").lower() in ("true", "1", "yes")
ENABLE_TRIALS = os.getenv("ENABLE_TRIALS", "true").lower() in ("true", "1", "yes")
ENABLE_ENFORCEMENT = os.getenv("ENABLE_ENFORCEMENT", "true").lower() in ("true", "1", "yes")

API_VERSION = "5.1.0"

logger.info(
    f"FDA leads config: offline={OFFLINE_MODE} sample_fallback={ENABLE_SAMPLE_FALLBACK} "
    f"trials={ENABLE_TRIALS} enforcement={ENABLE_ENFORCEMENT}"
)


def get_feature_flags() -> Dict[str, Any]:
    """Return the resolved feature flags, as reported by /health."""
    return {
        "offline_mode": OFFLINE_MODE,
        "sample_fallback": ENABLE_SAMPLE_FALLBACK,
        "auto_generate_on_startup": AUTO_GENERATE_ON_STARTUP,
        "clinical_trials": ENABLE_TRIALS,
        "enforcement": ENABLE_ENFORCEMENT,
        "log_json": LOG_JSON,
    }
