from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import time
import uuid

from vigil.services.supabase import DBConnection
from vigil.utils.config import config, EnvMode
from vigil.utils.logger import logger, bind_request_context
from vigil.billing.api import router as billing_router
from vigil.billing.external.stripe import StripeClient

instance_id = str(uuid.uuid4())[:8]


@asynccontextmanager
async def lifespan(app: FastAPI):
    env_mode = config.ENV_MODE.value if config.ENV_MODE else "unknown"
    logger.debug(f"Starting up FastAPI application with instance ID: {instance_id} in {env_mode} mode")

    app.state.db = DBConnection()
    app.state.stripe_client = StripeClient()
    try:
        await app.state.db.initialize()
    except Exception as e:
        logger.error(f"Error during application startup: {e}")
        raise

    yield

    logger.debug("Disconnecting from database")
    await app.state.db.disconnect()

app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def log_requests_middleware(request: Request, call_next):
    request_id = str(uuid.uuid4())
    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path

    bind_request_context(
        request_id=request_id,
        client_ip=client_ip,
        method=method,
        path=path,
    )

    logger.debug(f"Request started: {method} {path} from {client_ip}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.debug(f"Request completed: {method} {path} | Status: {response.status_code} | Time: {process_time:.2f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"Request failed: {method} {path} | Error: {e} | Time: {process_time:.2f}s")
        raise

allowed_origins = ["https://vigil.theintelligence.company"]

if config.ENV_MODE in (EnvMode.LOCAL, EnvMode.STAGING):
    allowed_origins.append("http://localhost:5173")
    allowed_origins.append("http://127.0.0.1:5173")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Stripe-Signature"],
)

api_router = APIRouter()
api_router.include_router(billing_router)


@api_router.get("/health", summary="Health Check", operation_id="health_check", tags=["system"])
async def health_check():
    logger.debug("Health check endpoint called")
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "instance_id": instance_id
    }


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    is_dev_env = config.ENV_MODE in [EnvMode.LOCAL, EnvMode.STAGING]
    workers = 1 if is_dev_env else 4

    logger.debug(f"Starting server on 0.0.0.0:8000 with {workers} workers")
    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=8000,
        workers=workers,
        loop="asyncio"
    )
