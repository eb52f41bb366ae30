from django.apps import AppConfig


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contact'
    verbose_name = 'Contact Form'

    services = None

    def ready(self):
        """Import signals and build the contact services when app is ready."""
        import contact.signals  # noqa
        self.reload_services()

    def reload_services(self):
        from .services import build_contact_services

        previous = self.services
        self.services = build_contact_services()
        if previous is not None:
            previous.close()
        return self.services
