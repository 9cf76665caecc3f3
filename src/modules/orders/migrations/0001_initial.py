import uuid6
from django.db import migrations, models

import modules.orders.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("email", models.EmailField(max_length=254)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("archived", "Archived"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "fulfillment_status",
                    models.CharField(
                        choices=[
                            ("not_fulfilled", "Not fulfilled"),
                            ("fulfilled", "Fulfilled"),
                            ("partially_fulfilled", "Partially fulfilled"),
                            ("returned", "Returned"),
                            ("shipped", "Shipped"),
                            ("canceled", "Canceled"),
                        ],
                        default="not_fulfilled",
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("awaiting", "Awaiting"),
                            ("captured", "Captured"),
                            ("refunded", "Refunded"),
                            ("canceled", "Canceled"),
                        ],
                        default="awaiting",
                        max_length=20,
                    ),
                ),
                (
                    "billing_address",
                    models.JSONField(
                        blank=True,
                        default=None,
                        null=True,
                        validators=[modules.orders.validators.validate_address],
                    ),
                ),
                (
                    "shipping_address",
                    models.JSONField(
                        blank=True,
                        default=None,
                        null=True,
                        validators=[modules.orders.validators.validate_address],
                    ),
                ),
                (
                    "items",
                    models.JSONField(
                        blank=True,
                        default=list,
                        validators=[modules.orders.validators.validate_line_items],
                    ),
                ),
                (
                    "payment_method",
                    models.JSONField(
                        blank=True,
                        default=None,
                        null=True,
                        validators=[modules.orders.validators.validate_payment_method],
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        validators=[modules.orders.validators.validate_metadata],
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="orders_status_idx"),
                    models.Index(
                        fields=["fulfillment_status"], name="orders_fulfillment_idx"
                    ),
                    models.Index(fields=["payment_status"], name="orders_payment_idx"),
                    models.Index(fields=["-created_at"], name="orders_created_idx"),
                ],
            },
        ),
    ]
