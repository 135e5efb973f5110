"""
HTTP handler layer: builds the FastAPI application around the services.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_service import __version__
from student_service.config import Settings
from student_service.core.exceptions import ApplicationException
from student_service.core.security import TokenManager
from student_service.middleware import LoggingMiddleware, application_exception_handler
from student_service.routers import auth, health, students
from student_service.services import Services

API_PREFIX = "/api/v1"


class Handler:
    """Exposes the services over HTTP."""

    def __init__(self, services: Services, token_manager: TokenManager):
        self.services = services
        self.token_manager = token_manager

    def init(self, settings: Settings) -> FastAPI:
        """
        Create the application with middleware and routes registered.

        Args:
            settings: Application settings (CORS origins, root path, environment)

        Returns:
            FastAPI application ready to be served
        """
        app = FastAPI(
            title="Student Service API",
            description="""
## Student Service

CRUD API for student accounts.

### Authentication
Obtain a token pair via `POST /api/v1/auth/sign-in` and pass the access token
as a header to protected endpoints:
```
Authorization: Bearer your_jwt_token
```
Renew it with `POST /api/v1/auth/refresh`.
            """,
            version=__version__,
            root_path=settings.server.root_path,
        )

        app.state.settings = settings
        app.state.services = self.services
        app.state.token_manager = self.token_manager

        app.add_middleware(LoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        app.add_exception_handler(ApplicationException, application_exception_handler)

        app.include_router(health.router)
        app.include_router(auth.router, prefix=API_PREFIX)
        app.include_router(students.router, prefix=API_PREFIX)

        @app.get("/", tags=["Root"])
        async def root():
            """Root endpoint with API information."""
            return {
                "name": settings.app_name,
                "version": __version__,
                "docs": "/docs",
                "health": "/health",
            }

        return app
