from django.apps import AppConfig

class TBGameConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "TB_game"
    verbose_name = "TecHub Battles"
