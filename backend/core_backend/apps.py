from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        from django.conf import settings

        logger.debug(
            f"Engine configured: default tax rate {settings.DEFAULT_TAX_RATE}, "
            f"card processor {settings.PAYMENT_CARD_PROCESSOR}"
        )
