from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="카테고리명")),
                ("description", models.TextField(blank=True, verbose_name="설명")),
                ("sortorder", models.IntegerField(default=0)),
                ("visible", models.BooleanField(default=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="categories.category",
                    ),
                ),
            ],
            options={
                "verbose_name": "강좌 카테고리",
                "verbose_name_plural": "강좌 카테고리",
                "db_table": "course_category",
                "ordering": ["sortorder", "id"],
            },
        ),
    ]
