# pharmacart/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pharmacart.api.routers import carts, checkout, delivery_charges, exchange_rates, pricing, wishlist
from pharmacart.api.routers.health import router as health_router
from pharmacart.domain.errors import PharmacartError
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


async def pharmacart_error_handler(request: Request, exc: PharmacartError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(
        title="Pharmacart",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(PharmacartError, pharmacart_error_handler)

    app.include_router(health_router)
    app.include_router(carts.router)
    app.include_router(wishlist.router)
    app.include_router(checkout.router)
    app.include_router(exchange_rates.router)
    app.include_router(delivery_charges.router)
    app.include_router(pricing.router)

    return app
