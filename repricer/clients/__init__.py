from django.conf import settings
from django.utils.module_loading import import_string


def get_client():
    """Instantiate the client class named by TAKEALOT_CLIENT_CLASS."""
    client_class = import_string(settings.TAKEALOT_CLIENT_CLASS)
    return client_class()
