"""
Service container.

Builds every service once at startup and wires explicit dependencies
between them. Routes reach services through app.state, never through
module-level singletons.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import logging

from civic_triage.core.settings import Settings
from civic_triage.services.activity_logger import ActivityLogger
from civic_triage.services.ai_plugin import AIProviderRegistry, build_ai_registry
from civic_triage.services.analyzer import ReportAnalyzer
from civic_triage.services.department_router import DepartmentRouter
from civic_triage.services.geocoding import build_geocoding_provider
from civic_triage.services.location_enricher import LocationEnricher
from civic_triage.services.messaging import FCMTransport, LoggingTransport, NotificationTransport
from civic_triage.services.notification_service import NotificationDispatcher
from civic_triage.services.priority_scoring import PriorityScorer
from civic_triage.services.report_pipeline import ReportPipeline
from civic_triage.services.report_service import ReportService
from civic_triage.services.report_store import FirestoreReportStore, MemoryReportStore, ReportStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    store: ReportStore
    scorer: PriorityScorer
    ai_registry: AIProviderRegistry
    analyzer: ReportAnalyzer
    enricher: LocationEnricher
    activity_logger: ActivityLogger
    router: DepartmentRouter
    dispatcher: NotificationDispatcher
    pipeline: ReportPipeline
    reports: ReportService


def _build_store(config: Settings, firebase_app) -> ReportStore:
    if config.USE_MOCK_DB:
        logger.warning("⚠️ USE_MOCK_DB=true: reports are kept in memory and lost on restart")
        return MemoryReportStore()

    from civic_triage.config.firebase import get_firestore_client
    logger.info("✅ Firestore report store initialized")
    return FirestoreReportStore(get_firestore_client(firebase_app))


def _build_transport(config: Settings, firebase_app) -> NotificationTransport:
    if not config.NOTIFICATIONS_ENABLED:
        logger.info("⚠️ NOTIFICATIONS_ENABLED=false: push notifications are simulated")
        return LoggingTransport()

    logger.info("✅ FCM notification transport initialized")
    return FCMTransport(firebase_app)


def build_services(
    config: Settings,
    store: Optional[ReportStore] = None,
    transport: Optional[NotificationTransport] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ServiceContainer:
    """
    Build the service graph.

    store, transport and clock may be injected (tests, scripts); anything
    not injected is built from settings.
    """
    firebase_app = None
    needs_store = store is None and not config.USE_MOCK_DB
    needs_fcm = transport is None and config.NOTIFICATIONS_ENABLED
    if needs_store or needs_fcm:
        from civic_triage.config.firebase import initialize_firebase
        firebase_app = initialize_firebase(config)

    store = store or _build_store(config, firebase_app)
    transport = transport or _build_transport(config, firebase_app)

    scorer = PriorityScorer(clock=clock)
    ai_registry = build_ai_registry(config, scorer)
    analyzer = ReportAnalyzer(ai_registry)
    enricher = LocationEnricher(build_geocoding_provider(config))
    activity_logger = ActivityLogger(store)
    router = DepartmentRouter(store, activity_logger)
    dispatcher = NotificationDispatcher(transport, authorities_topic=config.AUTHORITIES_TOPIC)

    pipeline = ReportPipeline(
        analyzer=analyzer,
        enricher=enricher,
        scorer=scorer,
        store=store,
        activity_logger=activity_logger,
        router=router,
        dispatcher=dispatcher,
    )

    return ServiceContainer(
        settings=config,
        store=store,
        scorer=scorer,
        ai_registry=ai_registry,
        analyzer=analyzer,
        enricher=enricher,
        activity_logger=activity_logger,
        router=router,
        dispatcher=dispatcher,
        pipeline=pipeline,
        reports=ReportService(store, activity_logger),
    )
