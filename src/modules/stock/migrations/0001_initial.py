import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockMovement",
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
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("ORDER_CREATE", "Order created"),
                            ("ORDER_CANCEL", "Order cancelled"),
                            ("ADMIN_ADJUST", "Admin adjustment"),
                        ],
                        max_length=20,
                    ),
                ),
                ("delta", models.IntegerField()),
                ("before_stock", models.IntegerField()),
                ("after_stock", models.IntegerField()),
                (
                    "reference_type",
                    models.CharField(blank=True, default="", max_length=32),
                ),
                (
                    "reference_id",
                    models.CharField(blank=True, default="", max_length=64),
                ),
                ("note", models.CharField(blank=True, default="", max_length=255)),
                ("actor", models.CharField(blank=True, default="", max_length=255)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "db_table": "stock_movements",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["product", "-created_at"],
                        name="stock_mv_product_idx",
                    ),
                    models.Index(
                        fields=["reference_type", "reference_id"],
                        name="stock_mv_reference_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            before_stock=models.F("after_stock") - models.F("delta")
                        ),
                        name="stock_mv_balance",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("delta", 0), _negated=True),
                        name="stock_mv_delta_non_zero",
                    ),
                ],
            },
        ),
    ]
