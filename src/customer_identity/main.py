"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import register_exception_handlers
from .api.middleware import BearerAuthenticationMiddleware
from .api.routes import auth, customers, health
from .clients.orders import OrderServiceClient
from .config import DEFAULT_JWT_SECRET, Settings, settings as default_settings
from .db.supabase import get_supabase_client
from .persistence.inmemory import InMemoryCustomerStore
from .persistence.store import CustomerStore
from .security.gate import AuthenticationGate
from .security.tokens import TokenCodec
from .security.users import UserDirectory
from .services.customers import CustomerService

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CustomerStore:
    if settings.supabase_configured:
        client = get_supabase_client(settings.supabase_url, settings.supabase_key)
        if client is not None:
            from .persistence.supabase import SupabaseCustomerStore

            logger.info("Using Supabase customer store")
            return SupabaseCustomerStore(client)
    logger.info("Supabase not configured - customers are kept in memory")
    return InMemoryCustomerStore()


def build_order_client(settings: Settings) -> Optional[OrderServiceClient]:
    if not settings.order_service_url:
        logger.info("Order service URL not configured - customer orders will be empty")
        return None
    return OrderServiceClient(settings.order_service_url, timeout=settings.order_service_timeout_seconds)


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[CustomerStore] = None,
    order_client: Optional[OrderServiceClient] = None,
    directory: Optional[UserDirectory] = None,
) -> FastAPI:
    settings = settings or default_settings
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("CID_JWT_SECRET is not set; using the development signing secret")

    directory = directory or UserDirectory.with_demo_accounts(rounds=settings.bcrypt_rounds)
    codec = TokenCodec(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expiration_seconds)
    gate = AuthenticationGate(
        directory,
        codec,
        public_paths=("/", settings.login_path, settings.health_path, *settings.public_paths),
    )
    service = CustomerService(
        store or build_store(settings),
        order_client if order_client is not None else build_order_client(settings),
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if service.order_client is not None:
            service.order_client.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.authentication_gate = gate
    app.state.customer_service = service

    app.add_middleware(BearerAuthenticationMiddleware, gate=gate)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_exception_handlers(app)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": settings.health_path,
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(customers.router, prefix=settings.api_prefix)
    return app


app = create_app()
