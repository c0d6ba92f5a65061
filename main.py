"""Main entry point for the Address Book Service."""

import uvicorn
from address_book_service.config.settings import settings
from address_book_service.config.logging import setup_logging


def main():
    """Run the FastAPI application."""
    setup_logging()

    uvicorn.run(
        "address_book_service.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
        log_config=None,  # Use our custom logging configuration
    )


if __name__ == "__main__":
    main()
