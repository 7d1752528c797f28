# currency/api/urls.py

from django.urls import path

from currency.api.views import (
    ConversionQuoteView,
    ExchangeRateDetailView,
    ExchangeRateListView,
    SeedDefaultRatesView,
)

urlpatterns = [
    path("rates/", ExchangeRateListView.as_view(), name="currency-rates"),
    # explicit route BEFORE the <method_code> catch-all
    path("rates/seed-defaults/", SeedDefaultRatesView.as_view(), name="currency-rates-seed"),
    path("rates/<str:method_code>/", ExchangeRateDetailView.as_view(), name="currency-rate-detail"),
    path("quote/", ConversionQuoteView.as_view(), name="currency-quote"),
]
