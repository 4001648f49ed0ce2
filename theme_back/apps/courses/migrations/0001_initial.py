from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("categories", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fullname", models.CharField(max_length=255, verbose_name="강좌명")),
                ("shortname", models.CharField(max_length=100, unique=True, verbose_name="약칭")),
                ("enable_completion", models.BooleanField(default=False, verbose_name="이수 추적 사용")),
                ("cover_image", models.FileField(blank=True, upload_to="coverimage/", verbose_name="커버 이미지")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="courses",
                        to="categories.category",
                        verbose_name="카테고리",
                    ),
                ),
            ],
            options={
                "verbose_name": "강좌",
                "verbose_name_plural": "강좌",
                "db_table": "course",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="CourseModule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="활동명")),
                ("modname", models.CharField(default="page", max_length=50, verbose_name="활동 유형")),
                ("position", models.IntegerField(default=0, verbose_name="표시 순서")),
                ("visible", models.BooleanField(default=True, verbose_name="표시")),
                ("stealth", models.BooleanField(default=False, verbose_name="링크로만 접근")),
                ("completion", models.BooleanField(default=False, verbose_name="이수 추적")),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modules",
                        to="courses.course",
                    ),
                ),
            ],
            options={
                "verbose_name": "강좌 활동",
                "verbose_name_plural": "강좌 활동",
                "db_table": "course_module",
                "ordering": ["position", "id"],
            },
        ),
    ]
