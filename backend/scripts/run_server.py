from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.app.core.dependencies import get_app_config
from backend.app.core.logging_config import configure_logging
from backend.app.core.server import build_server


def main() -> None:
    config = get_app_config()
    configure_logging(config.logging.level)
    build_server(config).run()


if __name__ == "__main__":
    main()
