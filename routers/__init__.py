# routers/__init__.py
from fastapi import APIRouter

from . import (
    auth, products, categories, subcategories, orders, checkout,
    deliveries, assemblies, maintenance, stats,
)

api_router = APIRouter()
api_router.include_router(auth.router)

# catalog
api_router.include_router(products.router)
api_router.include_router(categories.router)
# categories: tree อยู่นอก prefix /categories
api_router.include_router(categories.tree_router)
api_router.include_router(subcategories.router)

# orders + checkout
api_router.include_router(orders.router)
api_router.include_router(checkout.router)

# operations
api_router.include_router(deliveries.router)
api_router.include_router(assemblies.router)
api_router.include_router(maintenance.router)

# dashboard / monitoring
api_router.include_router(stats.router)
