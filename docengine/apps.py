from django.apps import AppConfig


class DocengineConfig(AppConfig):
    name = 'docengine'
    verbose_name = 'Documentation shortcodes'
