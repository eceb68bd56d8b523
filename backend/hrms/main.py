from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hrms.api.routes import health
from hrms.core.config import settings
from hrms.core.errors import register_exception_handlers
from hrms.core.logging import RequestContextMiddleware, configure_logging, get_logger
from hrms.core.monitoring import configure_error_monitoring
from hrms.core.observability import configure_observability
from hrms.domains.attendance.router import router as attendance_router
from hrms.domains.auth.router import router as auth_router
from hrms.domains.dashboard.router import router as dashboard_router
from hrms.domains.employees.router import router as employee_router
from hrms.domains.payroll.router import router as payroll_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth_router)
app.include_router(employee_router)
app.include_router(attendance_router)
app.include_router(payroll_router)
app.include_router(dashboard_router)


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env, status_policy=settings.attendance_status_policy)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "HR Portal API running", "environment": settings.env}
