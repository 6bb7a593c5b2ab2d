from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StorageSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(help_text="Name of the slot (e.g. 'moodEntries').", max_length=64, unique=True, verbose_name="Key")),
                ("data", models.BinaryField(default=b"", help_text="Raw payload, overwritten in full on every save.", verbose_name="Data")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
            ],
            options={
                "verbose_name": "Storage slot",
                "verbose_name_plural": "Storage slots",
            },
        ),
    ]
