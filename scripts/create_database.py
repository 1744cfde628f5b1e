import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from accounting_app.config import settings
from accounting_app.core.logging import configure_logging
from accounting_app.database import create_database


def main() -> int:
    logger = configure_logging(settings.log_level)
    try:
        created = create_database(settings)
    except Exception:
        logger.exception("Database setup failed")
        return 1
    print("Database created." if created else "Database already exists. Nothing to do.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
