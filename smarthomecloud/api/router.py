"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from smarthomecloud.api.auth import router as auth_router
from smarthomecloud.api.oauth import router as oauth_router
from smarthomecloud.api.users import router as users_router
from smarthomecloud.api.houses import router as houses_router
from smarthomecloud.api.devices import router as devices_router
from smarthomecloud.api.alerts import router as alerts_router
from smarthomecloud.api.automation import router as automation_router
from smarthomecloud.api.sensors import router as sensors_router
from smarthomecloud.api.audio import router as audio_router
from smarthomecloud.api.database import router as database_router
from smarthomecloud.api.maintenance import router as maintenance_router
from smarthomecloud.api.dashboard import router as dashboard_router
from smarthomecloud.api.websocket import router as websocket_router

api_router = APIRouter()
api_router.include_router(auth_router)
# after auth so /api/auth/user and friends win over /api/auth/{provider}
api_router.include_router(oauth_router)
api_router.include_router(users_router)
api_router.include_router(houses_router)
api_router.include_router(devices_router)
api_router.include_router(alerts_router)
api_router.include_router(automation_router)
api_router.include_router(sensors_router)
api_router.include_router(audio_router)
api_router.include_router(database_router)
api_router.include_router(maintenance_router)
api_router.include_router(dashboard_router)
api_router.include_router(websocket_router)
