from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stripbooth.config import settings
from stripbooth.api.routes import catalog, session, strips
from stripbooth.services.session import booth_session

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog.router, prefix="/api")
app.include_router(session.router, prefix="/api")
app.include_router(strips.router, prefix="/api")


@app.on_event("shutdown")
async def shutdown_event():
    booth_session.stop()


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "stage": booth_session.stage.value,
        "camera_active": booth_session.camera.is_active
    }
