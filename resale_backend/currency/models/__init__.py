# currency/models/__init__.py

from .exchange_rate import ExchangeRate

__all__ = ["ExchangeRate"]
