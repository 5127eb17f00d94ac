# backend/main.py
import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from config import settings  # noqa: E402
from database import SessionLocal, init_db  # noqa: E402
from seed import seed_database  # noqa: E402
from utils.errors import setup_error_handlers  # noqa: E402

# Router imports
from routes.auth import router as auth_router  # noqa: E402
from routes.users import router as users_router  # noqa: E402
from routes.products import router as products_router  # noqa: E402
from routes.cart import router as cart_router  # noqa: E402
from routes.orders import router as orders_router  # noqa: E402
from routes.payment import router as payment_router  # noqa: E402
from routes.admin import router as admin_router  # noqa: E402
from routes.receipt import router as receipt_router  # noqa: E402

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("lumiere")

ACCESS_LOG_MAX_LENGTH = 80


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    yield


app = FastAPI(title="Lumiere Storefront API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
# The storefront client runs on the Vite dev server locally; FRONTEND_URL adds the deployed origin
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)


@app.middleware("http")
async def access_log(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    path = request.url.path
    if path.startswith("/api"):
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        line = f"{request.method} {path} {response.status_code} in {elapsed_ms}ms"
        if len(line) > ACCESS_LOG_MAX_LENGTH:
            line = line[:ACCESS_LOG_MAX_LENGTH - 1] + "…"
        logger.info(line)
    return response


# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(payment_router)
app.include_router(admin_router)
app.include_router(receipt_router)


@app.get("/")
def read_root():
    return {"message": "Lumiere Storefront API is running"}
