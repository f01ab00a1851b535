from django.urls import path

from repricer import views

app_name = 'repricer'

urlpatterns = [
    path('sync-takealot-products', views.sync_takealot_products, name='sync-takealot-products'),
    path('takealot-webhook', views.takealot_webhook, name='takealot-webhook'),
    path('update-takealot-prices', views.update_takealot_prices, name='update-takealot-prices'),
]
