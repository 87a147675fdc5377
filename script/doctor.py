from __future__ import annotations

"""Environment doctor for the Artifactory client.

Checks that the ARTIFACTORY_* settings are present and that the configured
server answers ping, version and repository lookups.

Usage:
    python script/doctor.py --strict
"""

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from artifactory_client.doctor import main  # noqa: E402

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
