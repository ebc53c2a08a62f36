from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.domains.auth.routes import router as auth_router
from app.domains.auth.jwt_service import JWTService
from app.domains.otp.otp_service import OTPService
from app.domains.users.service import UserService
from app.config.mongodb import mongodb
from app.config.setting import settings
from app.shared.exceptions import register_exception_handlers
from app.shared.notifier import build_notifier
import logging
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app, include_details=settings.development_mode)


@app.on_event("startup")
async def startup():
    if settings.uses_default_jwt_secret:
        if not settings.development_mode:
            raise RuntimeError("JWT_SECRET must be set when development mode is off")
        logger.warning("Using the built-in development JWT secret")

    try:
        await mongodb.init_db()
    except Exception as e:
        logger.error(f"MongoDB connection failed: {str(e)}")
        raise

    user_service = UserService(mongodb.get_db()[settings.mongo_users_collection])
    await user_service.ensure_indexes()

    jwt_service = JWTService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.token_ttl_days,
    )

    app.state.user_service = user_service
    app.state.otp_service = OTPService(
        user_service,
        jwt_service,
        build_notifier(settings),
        development_mode=settings.development_mode,
        expiry_minutes=settings.otp_ttl_minutes,
        country_code=settings.default_country_code,
        brand=settings.sms_brand,
    )
    logger.info(f"{settings.app_name} started (development_mode={settings.development_mode})")


@app.on_event("shutdown")
def shutdown_db():
    mongodb.close()


@app.get("/")
async def health():
    return {"status": "ok", "app": settings.app_name}


app.include_router(auth_router)
