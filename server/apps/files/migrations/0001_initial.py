import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='HubMembership',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='hub_membership', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('hub_id', models.PositiveIntegerField(db_index=True, help_text='Identifier of the hub whose files the user can access')),
            ],
            options={
                'verbose_name': 'Hub Membership',
                'verbose_name_plural': 'Hub Memberships',
            },
        ),
    ]
