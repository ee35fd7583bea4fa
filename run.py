import logging

import uvicorn
from stripbooth.main import app
from stripbooth.config import settings

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger = logging.getLogger("stripbooth")
    logger.info("Starting %s on http://%s:%s", settings.app_name, settings.host, settings.port)
    logger.info("Strips will be saved to: %s", settings.exports_dir)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
