from django.apps import AppConfig


class ExchangesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.exchanges'
    verbose_name = 'Exchanges'

    def ready(self):
        from apps.exchanges import events

        for topic in events.Topic.ALL:
            events.subscribe(topic, events.log_exchange_event)
