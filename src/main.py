"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the gateway API with the NiceGUI page on one server.

    The gateway config is read from the environment once here and injected
    into the app.
    """
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.gateway.config import get_gateway_config
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_gateway_config()
    app = create_app(config)

    ui.run_with(
        app,
        title="Chat Relay",
        favicon="💬",
        dark=True,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI available at http://localhost:{port}/")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the gateway API and the NiceGUI page as separate processes.

    API on port 8000, UI on port 8080 (pointed at the API via API_BASE_URL).
    """
    import subprocess
    import time

    logger.info("Starting gateway API on http://localhost:8000")
    logger.info("Starting chat UI on http://localhost:8080")

    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "src.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            "8000",
        ]
    )
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
    )

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        api_proc.terminate()
        ui_proc.terminate()
        api_proc.wait()
        ui_proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the UI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Chat Relay in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
