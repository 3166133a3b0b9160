"""authdemo entrypoint.

Run with:
  python -m authdemo
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("AUTHDEMO_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("AUTHDEMO_HOST", "127.0.0.1")
    port = int(os.getenv("AUTHDEMO_PORT", "8000"))
    reload = os.getenv("AUTHDEMO_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("authdemo.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
