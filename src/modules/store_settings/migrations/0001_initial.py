from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Setting",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "key",
                    models.CharField(
                        choices=[
                            ("ORDER_ACCEPTING_ENABLED", "Order accepting enabled"),
                            ("ORDER_CLOSED_MESSAGE", "Order closed message"),
                            ("WORKING_HOURS_ENABLED", "Working hours enabled"),
                            ("WORKING_HOURS_START", "Working hours start"),
                            ("WORKING_HOURS_END", "Working hours end"),
                            ("MIN_ORDER_AMOUNT", "Minimum order amount"),
                            (
                                "PAYMENT_ON_DELIVERY_ENABLED",
                                "Payment on delivery enabled",
                            ),
                            (
                                "PAYMENT_ON_DELIVERY_METHODS",
                                "Payment on delivery methods",
                            ),
                            ("DELIVERY_FEE_FIXED", "Fixed delivery fee"),
                            ("DELIVERY_FREE_THRESHOLD", "Free delivery threshold"),
                        ],
                        max_length=100,
                        unique=True,
                    ),
                ),
                ("value", models.TextField(blank=True, default="")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "settings",
                "ordering": ["key"],
            },
        ),
    ]
