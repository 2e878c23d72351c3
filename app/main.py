from dotenv import load_dotenv

load_dotenv()

import uvicorn  # noqa: E402

from infrastructure.services import get_settings  # noqa: E402
from server import server  # noqa: E402

server_app = server.handler


def main():
    """Run the notification API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "main:server_app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
