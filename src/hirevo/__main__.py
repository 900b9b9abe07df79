"""Entry point for running the application with uvicorn."""

import uvicorn

from hirevo.config import get_settings
from hirevo.observability import configure_logging


def main() -> None:
    """Run the application."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(
        "hirevo.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
