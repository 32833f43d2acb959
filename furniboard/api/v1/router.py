from fastapi import APIRouter

from furniboard.api.v1.auth import router as auth_router
from furniboard.api.v1.brands import router as brands_router
from furniboard.api.v1.categories import router as categories_router
from furniboard.api.v1.contacts import router as contacts_router
from furniboard.api.v1.furniture import router as furniture_router
from furniboard.api.v1.quotes import router as quotes_router
from furniboard.api.v1.showroom import router as showroom_router

v1_router = APIRouter()

v1_router.include_router(auth_router)
v1_router.include_router(quotes_router)
v1_router.include_router(contacts_router)
v1_router.include_router(categories_router)
v1_router.include_router(furniture_router)
v1_router.include_router(brands_router)
v1_router.include_router(showroom_router)
