"""Dependency injection container for the application."""

from dependency_injector import containers, providers

from core.cache import now_ms
from core.config import Settings
from core.database import Database
from core.document_store import DocumentStore
from core.object_storage import ObjectStorage
from services.admins import AdminService
from services.analytics import AnalyticsService
from services.categories import CategoryService
from services.customers import CustomerService
from services.invitations import InvitationService
from services.marketing import MarketingService
from services.orders import OrderService
from services.payments import PaymentService
from services.products import ProductService
from services.site_config import SiteConfigService


class Container(containers.DeclarativeContainer):
    """Application dependency injection container."""

    # Settings
    settings = providers.Singleton(
        Settings,
    )

    clock = providers.Object(now_ms)

    ttl_ms = providers.Callable(lambda s: s.cache_ttl_ms, settings)

    # Store clients
    database = providers.Singleton(
        Database,
        settings=settings
    )

    document_store = providers.Singleton(
        DocumentStore,
        database=database
    )

    object_storage = providers.Singleton(
        ObjectStorage,
        settings=settings
    )

    # Cached services (one cache slot set per process)
    product_service = providers.Singleton(
        ProductService,
        store=document_store,
        storage=object_storage,
        ttl_ms=ttl_ms,
        clock=clock
    )

    category_service = providers.Singleton(
        CategoryService,
        store=document_store,
        ttl_ms=ttl_ms,
        clock=clock
    )

    order_service = providers.Singleton(
        OrderService,
        store=document_store,
        products=product_service,
        ttl_ms=ttl_ms,
        clock=clock
    )

    customer_service = providers.Singleton(
        CustomerService,
        store=document_store,
        ttl_ms=ttl_ms,
        clock=clock
    )

    invitation_service = providers.Singleton(
        InvitationService,
        store=document_store,
        expiry_days=providers.Callable(lambda s: s.invitation_expiry_days, settings),
        ttl_ms=ttl_ms,
        clock=clock
    )

    admin_service = providers.Singleton(
        AdminService,
        store=document_store,
        invitations=invitation_service,
        ttl_ms=ttl_ms,
        clock=clock
    )

    site_config_service = providers.Singleton(
        SiteConfigService,
        store=document_store,
        storage=object_storage,
        ttl_ms=ttl_ms,
        clock=clock
    )

    marketing_service = providers.Singleton(
        MarketingService,
        store=document_store,
        ttl_ms=ttl_ms,
        clock=clock
    )

    payment_service = providers.Singleton(
        PaymentService,
        store=document_store,
        ttl_ms=ttl_ms,
        clock=clock
    )

    analytics_service = providers.Singleton(
        AnalyticsService,
        store=document_store,
        orders=order_service,
        products=product_service,
        low_stock_threshold=providers.Callable(lambda s: s.low_stock_threshold, settings),
        clock=clock
    )


# Global container instance
container = Container()
