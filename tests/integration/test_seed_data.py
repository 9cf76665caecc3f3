from io import StringIO

import pytest
from django.core.management import call_command

from modules.orders.constants import FulfillmentStatus, OrderStatus, PaymentStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration


def test_seed_data_creates_every_state():
    out = StringIO()
    call_command("seed_data", count=1, stdout=out)

    assert "Seed completed: orders=6" in out.getvalue()
    assert Order.objects.count() == 6
    assert Order.objects.filter(status=OrderStatus.CANCELLED).count() == 1
    assert Order.objects.filter(status=OrderStatus.ARCHIVED).count() == 1
    assert Order.objects.filter(payment_status=PaymentStatus.AWAITING).count() == 2
    assert (
        Order.objects.filter(
            fulfillment_status=FulfillmentStatus.PARTIALLY_FULFILLED
        ).count()
        == 1
    )


def test_seed_data_default_count_from_settings(settings):
    settings.ORDERS_SEED_COUNT = 2
    call_command("seed_data", stdout=StringIO())
    assert Order.objects.count() == 12
