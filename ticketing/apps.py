from django.apps import AppConfig


class TicketingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ticketing"

    def ready(self) -> None:
        from ticketing.config import EngineConfig
        from ticketing.log_config import configure_logging

        configure_logging(EngineConfig.from_settings().log_level)
