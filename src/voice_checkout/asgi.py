from __future__ import annotations

from voice_checkout.adapters.inbound.web.fastapi_app import create_app
from voice_checkout.bootstrap import build_usecases
from voice_checkout.config import load_settings
from voice_checkout.logging import configure_logging

settings = load_settings()
configure_logging(settings.log_level, json=settings.log_json)

usecases = build_usecases(settings)
app = create_app(
    usecases.checkout,
    usecases.cart,
    usecases.orders,
    usecases.dispatcher,
    usecases.catalog,
)
