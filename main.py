import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from services.scheduler import start_scheduler
import services.scheduler as scheduler_module
from core.firebase import initialize_firebase
from core.config import settings
from api.v1 import income, expenses, goals, transactions, analytics, reports, notifications, email

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_firebase()
    start_scheduler()
    yield
    if scheduler_module.scheduler:
        scheduler_module.scheduler.shutdown()
        scheduler_module.scheduler = None


app = FastAPI(title="EduWallet", lifespan=lifespan)

RELAY_PATH = "/api/v1/email"


class AppCORSMiddleware(CORSMiddleware):
    """Frontend-origin CORS for the API. The email relay answers its own preflight for any origin."""

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"].startswith(RELAY_PATH):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


# CORS for the frontend
origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    AppCORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(income.router, prefix="/api/v1/income", tags=["Income"])
app.include_router(expenses.router, prefix="/api/v1/expenses", tags=["Expenses"])
app.include_router(goals.router, prefix="/api/v1/goals", tags=["Goals"])
app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["Transactions"])
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["Analytics"])
app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(email.router, prefix=RELAY_PATH, tags=["Email"])


@app.get("/")
def read_root():
    return {"status": "ok", "app": "EduWallet"}
