"""Entry point for running overture-api as a module: python -m overture_api."""

import sys

import uvicorn
from pydantic import ValidationError

from overture_api.settings import get_settings


def main() -> None:
    """Start the FastAPI server."""
    try:
        settings = get_settings()
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        print(f"Configuration error: {field}: {error['msg']}", file=sys.stderr)
        sys.exit(1)
    uvicorn.run(
        "overture_api.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
