#!/usr/bin/env python3
"""
main.py

Entry point for the todo HTTP API.

1. Reads configuration from TODO_* environment variables
2. Configures structured logging
3. Serves the FastAPI app with uvicorn; the app opens the database on
   startup and closes it on shutdown
"""
import uvicorn

from todolist.api.app import create_app
from todolist.config import Config
from todolist.logging_config import configure_logging


def main():
    config = Config()
    configure_logging(level=config.logging.level, log_json=config.logging.json)

    app = create_app(config=config)
    # log_config=None keeps uvicorn from replacing our handlers.
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
