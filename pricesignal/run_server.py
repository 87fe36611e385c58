"""
Run the PriceSignal API server.
"""
import logging
import os

# Load environment
from dotenv import load_dotenv
load_dotenv(os.path.join(os.getcwd(), ".env"))

import uvicorn

from pricesignal.core.config import settings


def main():
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("Starting PriceSignal API Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "pricesignal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
