import logging

import uvicorn

from quizgen.config import load_settings
from quizgen.main import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    # Fails loudly on a missing OPENAI_API_KEY before anything listens.
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings)
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
