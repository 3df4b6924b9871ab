"""Run the API with uvicorn: ``python -m chat_proxy``."""

import uvicorn

from chat_proxy.core.config import settings


def main() -> None:
    uvicorn.run(
        "chat_proxy.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
