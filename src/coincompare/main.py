"""CoinCompare - Main application entry point."""

import uvicorn

from coincompare.api.app import create_app
from coincompare.config import get_settings

# Create the app instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "coincompare.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
