"""
Altera o perfil de um usuário pelo e-mail

Uso:
    python update_user_role.py usuario@example.com store_owner
"""

import argparse
import logging
import sys

from src.core.database import get_db_manager
from src.core.db_initialization import update_user_role
from src.core.utils.enums import UserRole

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Altera o perfil de um usuário")
    parser.add_argument("email")
    parser.add_argument("role", choices=[role.value for role in UserRole])
    args = parser.parse_args()

    with get_db_manager() as db:
        user = update_user_role(db, args.email, UserRole(args.role))

    if user is None:
        logger.error(f"❌ Usuário não encontrado: {args.email}")
        return 1

    logger.info(f"✅ {user.name} <{user.email}> agora é {user.role.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
