"""Entry point to run the booking API with uvicorn."""

import os
import sys
from pathlib import Path

# Load .env file FIRST so the settings pick it up
from dotenv import load_dotenv
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

import uvicorn


def main():
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    reload = "--reload" in sys.argv

    print(f"Starting booking API on http://{host}:{port} (docs at /docs)")
    uvicorn.run("booking_engine.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
