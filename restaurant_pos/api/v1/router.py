from fastapi import APIRouter

from restaurant_pos.api.v1.endpoints import (
    auth,
    billing,
    events,
    kitchen,
    menu,
    tables,
    users,
)

api_router_v1 = APIRouter()

api_router_v1.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router_v1.include_router(users.router, prefix="/users", tags=["Users"])
api_router_v1.include_router(tables.router, prefix="/tables", tags=["Tables"])
api_router_v1.include_router(kitchen.router, prefix="/kitchen", tags=["Kitchen"])
api_router_v1.include_router(billing.router, prefix="/billing", tags=["Billing"])
api_router_v1.include_router(menu.router, prefix="/menu", tags=["Menu"])
api_router_v1.include_router(events.router, prefix="/events", tags=["Events"])


@api_router_v1.get("/", tags=["Root V1"])
async def read_root_v1():
    return {"message": "API V1 operational"}
