from django.apps import AppConfig


class SiteCountsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sitecounts"
    verbose_name = "Site counts"
