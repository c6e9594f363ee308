"""
Shared pytest fixtures: fake collaborators wired into the handlers and an
ASGI client for the FastAPI app.
"""
import sys
import os

# Add backend to path FIRST
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import httpx
from vigil.billing.subscriptions.handlers.portal import PortalHandler
from vigil.billing.subscriptions.repositories import SubscriptionRepository, SubscriptionEventRepository
from vigil.billing.external.stripe import WebhookService
from tests.fakes import FakeDB, FakePaymentProvider, FakeSupabase


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase(tables={
        'user_subscriptions': [
            {'user_id': 'u1', 'stripe_customer_id': 'cus_123', 'stripe_subscription_id': 'sub_1', 'tier': 'professional', 'status': 'active'},
        ],
    })


@pytest.fixture
def db(supabase: FakeSupabase) -> FakeDB:
    return FakeDB(supabase)


@pytest.fixture
def payments() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest.fixture
def portal_handler(db: FakeDB, payments: FakePaymentProvider) -> PortalHandler:
    return PortalHandler(
        subscriptions=SubscriptionRepository(db),
        payments=payments,
        default_return_url="https://app.example/settings",
    )


@pytest.fixture
def webhook_service(db: FakeDB, payments: FakePaymentProvider) -> WebhookService:
    return WebhookService(
        subscriptions=SubscriptionRepository(db),
        events=SubscriptionEventRepository(db),
        payments=payments,
        webhook_secret="whsec_test",
    )


@pytest.fixture
async def api_client(db: FakeDB, payments: FakePaymentProvider):
    """
    ASGI client for the FastAPI app. Lifespan does not run under ASGITransport,
    so the fakes are placed on app.state directly.
    """
    from api import app

    app.state.db = db
    app.state.stripe_client = payments
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver"
    ) as client:
        yield client
