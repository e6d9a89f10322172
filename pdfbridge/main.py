"""
pdfbridge entrypoint - runs uvicorn server.
"""

import uvicorn

from pdfbridge.app import build_app
from pdfbridge.config import get_settings


def main() -> None:
    """Run the pdfbridge server."""
    settings = get_settings()
    app = build_app(settings)

    print(f"Starting pdfbridge on http://{settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
