from __future__ import annotations

import logging

from src.attendance_bot.attendance_bot.bot.polling import run_polling
from src.attendance_bot.attendance_bot.core.exceptions import TransportError
from src.attendance_bot.attendance_bot.main import CONTAINER_KEY, SCHEDULER_KEY, create_app

logger = logging.getLogger("attendance_bot")

app = create_app()


def main() -> None:
    container = app.extensions[CONTAINER_KEY]
    settings = container.settings
    scheduler = app.extensions.get(SCHEDULER_KEY)

    try:
        if settings.webhook_url:
            webhook_url = f"{settings.webhook_url}/webhook/{settings.bot_token}"
            try:
                container.telegram.set_webhook(webhook_url)
                logger.info("Webhook set: %s", container.telegram.get_webhook_info().get("url"))
            except TransportError:
                logger.exception("Could not set webhook")
            app.run(host=app.config["HOST"], port=app.config["PORT"], use_reloader=False)
        else:
            logger.info("WEBHOOK_URL not provided, using long-polling mode")
            run_polling(container.telegram, container.bot_service)
    except KeyboardInterrupt:
        pass
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)


if __name__ == "__main__":
    main()
