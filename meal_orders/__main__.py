"""Run the API server: ``python -m meal_orders``."""

import uvicorn

from meal_orders.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "meal_orders.main:app",
        host=settings.api_host,
        port=settings.port,
        reload=settings.is_development and settings.debug,
    )


if __name__ == "__main__":
    main()
