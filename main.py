from fastapi import FastAPI
from contextlib import asynccontextmanager
from sqlmodel import Session

from app.config import ADMIN_USERNAME, ADMIN_PASSWORD, LOG_LEVEL
from app.database import create_db_and_tables, engine
from app.logging_config import setup_logging
from app.services.auth import create_user, get_user_by_username


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging(LOG_LEVEL)
    # Startup: Create database tables
    create_db_and_tables()
    with Session(engine) as db:
        if not get_user_by_username(db, ADMIN_USERNAME):
            create_user(db, ADMIN_USERNAME, f"{ADMIN_USERNAME}@localhost", ADMIN_PASSWORD, is_admin=True)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="World Cup Fantasy League",
    description="Predict World Cup outcomes and scores and compete on the leaderboard",
    version="1.0.0",
    lifespan=lifespan
)

# Include routers
from app.routers import admin, auth, leaderboard, matches, predictions, teams

app.include_router(auth.router)
app.include_router(teams.router)
app.include_router(matches.router)
app.include_router(predictions.router)
app.include_router(leaderboard.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
