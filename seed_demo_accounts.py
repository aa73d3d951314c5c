"""
Contas de demonstração
======================

Uso:
    python seed_demo_accounts.py           # cria (recria) as contas
    python seed_demo_accounts.py --clear   # apenas remove
"""

import argparse
import logging
import sys

from src.core import models
from src.core.database import engine, get_db_manager
from src.core.db_initialization import DEMO_ACCOUNTS, clear_demo_accounts, seed_demo_accounts

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Cria ou remove as contas de demonstração")
    parser.add_argument("--clear", action="store_true", help="apenas remove as contas")
    args = parser.parse_args()

    models.Base.metadata.create_all(bind=engine)

    with get_db_manager() as db:
        if args.clear:
            removed = clear_demo_accounts(db)
            logger.info(f"✅ {removed} conta(s) removida(s)")
            return 0

        seed_demo_accounts(db)

    logger.info("✅ Contas de demonstração criadas!")
    logger.info("Credenciais:")
    for account in DEMO_ACCOUNTS:
        logger.info(f"   {account['role'].value}: {account['email']} / {account['password']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
