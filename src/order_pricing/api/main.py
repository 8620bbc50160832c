from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional, Union

from ..config.settings import get_settings
from ..engine import Cart, PricingError, resolve_bundle_price
from .splits_api import router as splits_router
from .state import get_catalog, get_load_report, reload_catalog

app = FastAPI(
    title="Order Pricing API",
    description="Bundle pricing, cart totals and invoice splits for order pages",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(splits_router)


class PriceRequest(BaseModel):
    # str accepted for raw form input; the resolver validates it
    area: Optional[Union[int, str]] = None


class CartItemIn(BaseModel):
    type: str  # "bundle" or "service"
    id: str
    area: Optional[Union[int, str]] = None
    quantity: Optional[int] = None


class CartRequest(BaseModel):
    items: list[CartItemIn]
    tax_rate_percent: Optional[float] = None


def _bad_request(e: PricingError):
    return HTTPException(status_code=400, detail=e.to_dict())


@app.get("/")
async def root():
    return {"status": "online", "message": "Order Pricing API Active"}


@app.get("/catalog")
async def get_catalog_listing():
    catalog = get_catalog()
    return jsonable_encoder({"bundles": catalog.bundles, "services": catalog.services})


@app.post("/bundles/{bundle_id}/price")
async def price_bundle(bundle_id: str, req: PriceRequest):
    bundle = get_catalog().get_bundle(bundle_id)
    if bundle is None:
        raise HTTPException(status_code=404, detail=f"Bundle '{bundle_id}' not found")
    try:
        result = resolve_bundle_price(bundle, req.area)
    except PricingError as e:
        raise _bad_request(e)
    return jsonable_encoder(result)


@app.post("/cart/summary")
async def cart_summary(req: CartRequest):
    """Build a cart from posted items and return its checkout summary."""
    catalog = get_catalog()
    cart = Cart()
    try:
        for item in req.items:
            if item.type == "bundle":
                bundle = catalog.get_bundle(item.id)
                if bundle is None:
                    raise HTTPException(status_code=404, detail=f"Bundle '{item.id}' not found")
                cart.add_bundle(bundle, item.area)
            elif item.type == "service":
                service = catalog.get_service(item.id)
                if service is None:
                    raise HTTPException(status_code=404, detail=f"Service '{item.id}' not found")
                line = cart.add_service(service)
                if item.quantity is not None:
                    # quantity replaces the unit add_service just counted
                    cart.set_service_quantity(service.service_id, line.quantity - 1 + item.quantity)
            else:
                raise HTTPException(status_code=400, detail=f"Unknown item type '{item.type}'")
        summary = cart.checkout(req.tax_rate_percent)
    except PricingError as e:
        raise _bad_request(e)
    return jsonable_encoder(summary)


@app.get("/system/status")
async def get_status():
    settings = get_settings()
    catalog = get_catalog()
    report = get_load_report()
    return {
        "engine_active": True,
        "catalog_dir": str(settings.catalog_dir),
        "catalog_status": report.get("status"),
        "bundles_count": len(catalog.bundles),
        "services_count": len(catalog.services),
        "warnings": report.get("warnings", []),
        "errors": report.get("errors", []),
    }


@app.post("/system/reload")
async def reload():
    report = reload_catalog()
    return {"success": report.get("status") != "failed", "report": report}
