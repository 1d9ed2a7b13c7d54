import uvicorn

from src.app.api import create_app
from src.core.utils.logger import logger
from src.core.utils.settings import get_settings

app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    logger.info(
        "unicart-scraper listening",
        extra={"host": settings.host, "port": settings.port},
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
