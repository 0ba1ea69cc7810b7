from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UnitAvailability",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "unit_id",
                    models.CharField(help_text="Identifiant du logement ou du véhicule.", max_length=64),
                ),
                ("date", models.DateField()),
                ("is_available", models.BooleanField(default=True, null=True)),
                (
                    "price_override",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Prix spécifique pour ce jour.",
                        max_digits=12,
                        null=True,
                    ),
                ),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Disponibilité",
                "verbose_name_plural": "Disponibilités",
                "ordering": ["unit_id", "date"],
                "indexes": [models.Index(fields=["unit_id", "is_available"], name="unit_avail_unit_state_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("unit_id", "date"), name="unit_availability_unique_day"),
                ],
            },
        ),
    ]
