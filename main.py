"""
Servidor - StoreRating API
==========================

    python main.py
"""

import uvicorn

from src.core.config import config


def main():
    """Função principal para executar o servidor"""
    uvicorn.run(
        "src.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.is_development,
        log_level=config.LOG_LEVEL.lower(),
        access_log=config.DEBUG,
    )


if __name__ == "__main__":
    main()
