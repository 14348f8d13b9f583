"""Process entrypoint for the FatSecret proxy."""

import uvicorn

from fatsecret_proxy.api.app import create_app
from fatsecret_proxy.config import Settings
from fatsecret_proxy.containers import build_container


def main() -> None:
    """Start the API server on the configured host and port."""
    settings = Settings()
    uvicorn.run(
        create_app(build_container(settings)),
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
