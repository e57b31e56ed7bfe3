from app.routes.customer import router as customer_router
from app.routes.project import router as project_router
from app.routes.payment import router as payment_router
from app.routes.admin import router as admin_router

__all__ = ["customer_router", "project_router", "payment_router", "admin_router"]
