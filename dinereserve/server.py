"""FastAPI server exposing the DineReserve catalog, bookings, admin tools and chat."""

import datetime as dt
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import (
    Depends,
    FastAPI,
    File,
    Header,
    HTTPException,
    Query,
    Request,
    UploadFile,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dinereserve.config import get_config, setup_logging
from dinereserve.container import Container
from dinereserve.errors import (
    AuthenticationError,
    DineReserveError,
    DuplicateReviewError,
    InvalidRequestError,
    InvalidTransitionError,
    InvalidUploadError,
    NotFoundError,
    SlotUnavailableError,
    UpstreamError,
    VersionConflictError,
)
from dinereserve.models import (
    AnalyticsReport,
    Booking,
    BookingCreate,
    ChatRequest,
    ChatResponse,
    Credentials,
    GoogleLogin,
    PasswordCheck,
    PasswordResetRequest,
    Registration,
    Restaurant,
    RestaurantCreate,
    RestaurantUpdate,
    Review,
    ReviewCreate,
    SearchFilter,
    StatusUpdate,
    TimeSlot,
    User,
    UserRole,
)
from dinereserve.services import validate_image, validate_password

logger = logging.getLogger(__name__)

# First match wins, so subclasses must come before their bases.
ERROR_STATUS_CODES: list[tuple[type[DineReserveError], int]] = [
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (VersionConflictError, 409),
    (SlotUnavailableError, 409),
    (DuplicateReviewError, 409),
    (InvalidRequestError, 400),
    (InvalidUploadError, 400),
    (AuthenticationError, 401),
    (UpstreamError, 500),
]


# Set through the admin approve/suspend routes, never by a listing's manager.
ADMIN_ONLY_FIELDS = {"is_approved", "suspended"}


def status_code_for(exc: DineReserveError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def get_container(request: Request) -> Container:
    """Dependency to get the service container from app state.

    Raises:
        HTTPException: If the container is not initialized
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Services not initialized yet")
    return container


def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    x_user_name: str | None = Header(None),
    x_user_role: UserRole = Header(UserRole.CUSTOMER),
) -> User:
    """Identity forwarded by the frontend after sign-in."""
    if not x_user_id:
        raise AuthenticationError("Sign in required")
    return User(
        id=x_user_id,
        email=x_user_email or "",
        name=x_user_name or "Guest",
        role=x_user_role,
    )


def require_role(*roles: UserRole):
    """Dependency factory that rejects users without one of the given roles."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(
                status_code=403,
                detail=f"Requires role: {', '.join(r.value for r in roles)}",
            )
        return user

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_manager = require_role(UserRole.MANAGER, UserRole.ADMIN)


def check_owner(restaurant: Restaurant, user: User) -> None:
    if user.role != UserRole.ADMIN and restaurant.manager_id != user.id:
        raise HTTPException(
            status_code=403, detail="Only the restaurant's manager can change it"
        )


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        container: Prewired services; when omitted the lifespan builds one
            from the global configuration
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Application lifespan manager."""
        if getattr(_app.state, "container", None) is None:
            config = get_config()
            logger.info(
                f"Starting DineReserve API on {config.server_host}:{config.server_port}"
            )
            services = Container(config)
            if config.seed_demo_data:
                services.seed_demo_data()
            _app.state.container = services

        yield

        logger.info("Shutting down DineReserve API")

    app = FastAPI(
        title="DineReserve API",
        description="Restaurant discovery and table booking",
        version="0.1.0",
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    # The browser frontend is served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DineReserveError)
    async def handle_domain_error(_request: Request, exc: DineReserveError):
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "service": "dinereserve-api"}

    # Restaurants

    @app.get("/api/restaurants", response_model=list[Restaurant])
    async def list_restaurants(
        approved_only: bool = False,
        container: Container = Depends(get_container),
    ):
        return container.catalog.list_restaurants(approved_only=approved_only)

    @app.get("/api/restaurants/search", response_model=list[Restaurant])
    async def search_restaurants(
        location: str | None = None,
        cuisine: str | None = None,
        container: Container = Depends(get_container),
    ):
        return container.catalog.search(SearchFilter(location=location, cuisine=cuisine))

    @app.get("/api/restaurants/pending", response_model=list[Restaurant])
    async def list_pending_restaurants(
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return container.catalog.list_pending()

    @app.get("/api/managers/{manager_id}/restaurants", response_model=list[Restaurant])
    async def list_manager_restaurants(
        manager_id: str, container: Container = Depends(get_container)
    ):
        return container.catalog.list_by_manager(manager_id)

    @app.get("/api/restaurants/{restaurant_id}", response_model=Restaurant)
    async def get_restaurant(
        restaurant_id: str, container: Container = Depends(get_container)
    ):
        return container.catalog.get_by_id(restaurant_id)

    @app.post("/api/restaurants", response_model=Restaurant, status_code=201)
    async def create_restaurant(
        data: RestaurantCreate,
        user: User = Depends(require_manager),
        container: Container = Depends(get_container),
    ):
        return container.catalog.create(data, manager_id=user.id)

    @app.patch("/api/restaurants/{restaurant_id}", response_model=Restaurant)
    async def update_restaurant(
        restaurant_id: str,
        changes: RestaurantUpdate,
        expected_version: int | None = Query(
            None, description="Version last read; stale versions are rejected"
        ),
        user: User = Depends(require_manager),
        container: Container = Depends(get_container),
    ):
        check_owner(container.catalog.get_by_id(restaurant_id), user)
        admin_fields = changes.model_fields_set & ADMIN_ONLY_FIELDS
        if admin_fields and user.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=403,
                detail=f"Only an admin can change: {', '.join(sorted(admin_fields))}",
            )
        return container.catalog.update(restaurant_id, changes, expected_version)

    @app.delete("/api/restaurants/{restaurant_id}", status_code=204)
    async def remove_restaurant(
        restaurant_id: str,
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        container.catalog.remove(restaurant_id)

    @app.post("/api/restaurants/{restaurant_id}/approve", response_model=Restaurant)
    async def approve_restaurant(
        restaurant_id: str,
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return container.catalog.approve(restaurant_id)

    @app.post("/api/restaurants/{restaurant_id}/suspend", response_model=Restaurant)
    async def toggle_restaurant_suspension(
        restaurant_id: str,
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return container.catalog.toggle_suspension(restaurant_id)

    @app.get(
        "/api/restaurants/{restaurant_id}/availability", response_model=list[TimeSlot]
    )
    async def get_availability(
        restaurant_id: str,
        date: dt.date = Query(..., description="Calendar date (YYYY-MM-DD)"),
        party_size: int = Query(2, gt=0),
        container: Container = Depends(get_container),
    ):
        restaurant = container.catalog.get_by_id(restaurant_id)
        return container.availability.generate(restaurant, date, party_size)

    @app.get("/api/restaurants/{restaurant_id}/reviews", response_model=list[Review])
    async def list_reviews(
        restaurant_id: str, container: Container = Depends(get_container)
    ):
        return container.reviews.list_for_restaurant(restaurant_id)

    @app.post(
        "/api/restaurants/{restaurant_id}/reviews",
        response_model=Review,
        status_code=201,
    )
    async def add_review(
        restaurant_id: str,
        data: ReviewCreate,
        user: User = Depends(get_current_user),
        container: Container = Depends(get_container),
    ):
        return container.reviews.add(restaurant_id, data, user)

    @app.post("/api/restaurants/{restaurant_id}/images", status_code=201)
    async def upload_image(
        restaurant_id: str,
        file: UploadFile = File(...),
        user: User = Depends(require_manager),
        container: Container = Depends(get_container),
    ):
        """Store an image and append its URL to the restaurant's gallery."""
        check_owner(container.catalog.get_by_id(restaurant_id), user)

        max_bytes = container.config.max_upload_bytes
        if file.size is not None:
            validate_image(file.content_type or "", file.size, max_bytes)
        # One byte over the limit is enough for the storage check to reject it.
        content = await file.read(max_bytes + 1)
        url = await run_in_threadpool(
            container.storage.upload,
            content,
            file.filename or "",
            file.content_type or "",
            restaurant_id,
        )
        updated = container.catalog.add_image(restaurant_id, url)
        return {"url": url, "restaurant": updated}

    @app.get(
        "/api/restaurants/{restaurant_id}/bookings", response_model=list[Booking]
    )
    async def list_restaurant_bookings(
        restaurant_id: str,
        user: User = Depends(require_manager),
        container: Container = Depends(get_container),
    ):
        check_owner(container.catalog.get_by_id(restaurant_id), user)
        return container.ledger.list_by_restaurant(restaurant_id)

    # Bookings

    @app.post("/api/bookings", response_model=Booking, status_code=201)
    async def create_booking(
        data: BookingCreate,
        idempotency_key: str | None = Header(None),
        container: Container = Depends(get_container),
    ):
        return await container.ledger.create_async(data, idempotency_key=idempotency_key)

    @app.get("/api/bookings", response_model=list[Booking])
    async def list_bookings(
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return container.ledger.list_all()

    @app.get("/api/users/{user_id}/bookings", response_model=list[Booking])
    async def list_user_bookings(
        user_id: str, container: Container = Depends(get_container)
    ):
        return container.ledger.list_by_user(user_id)

    @app.get("/api/bookings/{booking_id}", response_model=Booking)
    async def get_booking(booking_id: str, container: Container = Depends(get_container)):
        return container.ledger.get_by_id(booking_id)

    @app.patch("/api/bookings/{booking_id}/status", response_model=Booking)
    async def update_booking_status(
        booking_id: str,
        update: StatusUpdate,
        container: Container = Depends(get_container),
    ):
        return container.ledger.update_status(booking_id, update.status)

    @app.post("/api/bookings/{booking_id}/cancel", response_model=Booking)
    async def cancel_booking(
        booking_id: str, container: Container = Depends(get_container)
    ):
        return container.ledger.cancel(booking_id)

    # Admin

    @app.get("/api/admin/analytics", response_model=AnalyticsReport)
    async def get_analytics(
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return container.analytics()

    @app.post("/api/admin/recompute-counters")
    async def recompute_counters(
        _admin: User = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        return {"corrected": container.ledger.recompute_bookings_today()}

    # Auth

    @app.post("/api/auth/login", response_model=User)
    def login(credentials: Credentials, container: Container = Depends(get_container)):
        return container.auth.login(credentials.email, credentials.password)

    @app.post("/api/auth/register", response_model=User, status_code=201)
    def register(
        registration: Registration, container: Container = Depends(get_container)
    ):
        return container.auth.register(
            registration.email, registration.name, registration.password
        )

    @app.post("/api/auth/reset-password", status_code=202)
    def request_password_reset(
        body: PasswordResetRequest, container: Container = Depends(get_container)
    ):
        container.auth.request_password_reset(body.email)
        return {"status": "sent"}

    @app.post("/api/auth/google", response_model=User)
    def login_with_google(
        body: GoogleLogin, container: Container = Depends(get_container)
    ):
        return container.auth.login_with_google(body.access_token)

    @app.post("/api/auth/password-strength")
    async def check_password_strength(body: PasswordCheck):
        errors = validate_password(body.password)
        return {"valid": not errors, "errors": errors}

    # Chat

    @app.post("/api/llm", response_model=ChatResponse)
    async def chat(request: ChatRequest, container: Container = Depends(get_container)):
        """Answer a chat widget message.

        Request body:
            {"messages": [{"role": "user", "content": "Mexican food in San Francisco"}]}
        """
        return await container.chat.respond(request.messages)

    @app.get("/api/gemini-models")
    async def list_models(container: Container = Depends(get_container)):
        return {"models": await container.chat.list_models()}

    return app


app = create_app()


def run_server():
    """Run the FastAPI server using uvicorn.

    This is the main entry point for the server.
    """
    setup_logging()
    config = get_config()

    uvicorn.run(
        "dinereserve.server:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run_server()
