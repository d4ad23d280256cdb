# ipfs_cluster_client/core/version.py
"""Package version, used in the User-Agent sent to the cluster."""
from functools import lru_cache
from importlib import metadata
from pathlib import Path


DISTRIBUTION_NAME = "ipfs-cluster-client"
VERSION_FILE = Path(__file__).parent.parent.parent / "VERSION"


@lru_cache()
def get_version() -> str:
    """Resolve the client version string.

    Priority:
    1. Installed distribution metadata (pip install / pip install -e)
    2. VERSION file next to the package (source checkouts)
    3. Fallback to 0.0.0-unknown
    """
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    if VERSION_FILE.exists():
        version = VERSION_FILE.read_text().strip()
        if version:
            return version

    return "0.0.0-unknown"


def user_agent() -> str:
    return f"{DISTRIBUTION_NAME}/{get_version()}"


VERSION = get_version()
