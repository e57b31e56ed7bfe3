from app.services.audit_service import AuditService
from app.services.customer_service import CustomerService
from app.services.document_service import DocumentGenerator
from app.services.notification_service import NotificationService
from app.services.payment_gateway import RazorpayClient, PaymentGatewayError
from app.services.project_service import ProjectService
from app.services.renewal_service import RenewalService

__all__ = [
    "AuditService", "CustomerService", "DocumentGenerator", "NotificationService",
    "RazorpayClient", "PaymentGatewayError", "ProjectService", "RenewalService",
]
