"""Console entry point: serve the app on the address given by BIND."""

import uvicorn

from lira_checker.core.config import get_settings
from lira_checker.main import create_app


def main() -> None:
    settings = get_settings()
    host, port = settings.bind_address()
    # log_config=None keeps the JSON logging set up by create_app
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
