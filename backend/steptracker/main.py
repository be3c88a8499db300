from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from steptracker.api.steps import router as steps_router
from steptracker.api.walks import router as walks_router
from steptracker.api.goals import router as goals_router
from steptracker.api.tracking import router as tracking_router
from steptracker.api.routes import router as routes_router
from steptracker.core.errors import register_exception_handlers
from steptracker.core.log_config import configure_logging
from steptracker.db import Base, engine
from steptracker.models.step_data import StepData  # noqa: F401  (import ensures table is registered)
from steptracker.models.step_goal import StepGoal  # noqa: F401
from steptracker.models.walk_session import WalkSession  # noqa: F401
from steptracker.models.route_coordinate import RouteCoordinate  # noqa: F401
from steptracker.models.walk_track import WalkTrack  # noqa: F401
from steptracker.models.saved_route import SavedRoute  # noqa: F401


configure_logging()

app = FastAPI(title="Step Tracker API")

# Allow CORS for the mobile/web clients
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(steps_router)
app.include_router(walks_router)
app.include_router(goals_router)
app.include_router(tracking_router)
app.include_router(routes_router)


@app.get("/")
def root():
    return {"message": "Step tracker backend is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("steptracker.main:app", host="0.0.0.0", port=8000, reload=True)
