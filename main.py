"""Launch the geometry adapter FastAPI server."""

import logging

import uvicorn

from geoadapter import settings


def main():
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("geoadapter.server:app", host=settings.HOST, port=settings.PORT, reload=True)


if __name__ == "__main__":
    main()
