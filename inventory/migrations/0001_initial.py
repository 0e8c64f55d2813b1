# Initial migration for the inventory app
# Generated to match current model state

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models
import inventory.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        # Box number pool
        migrations.CreateModel(
            name='BoxNumberPool',
            fields=[
                ('box_number', models.PositiveIntegerField(primary_key=True, serialize=False, validators=[django.core.validators.MinValueValidator(1)])),
                ('is_available', models.BooleanField(default=True)),
                ('last_used_at', models.DateTimeField(blank=True, help_text='When the number was last handed out (not touched on release)', null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
            ],
            options={
                'verbose_name': 'Box number',
                'verbose_name_plural': 'Box number pool',
                'db_table': 'box_number_pool',
                'ordering': ['box_number'],
                'indexes': [
                    models.Index(fields=['is_available', 'box_number'], name='boxpool_available_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('box_number__gte', 1)), name='boxpool_number_positive'),
                ],
            },
        ),
        # Boxes
        migrations.CreateModel(
            name='Box',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('uuid', models.CharField(default=inventory.models._box_uuid, editable=False, max_length=36, unique=True)),
                ('box_number', models.PositiveIntegerField(blank=True, editable=False, null=True, unique=True)),
                ('current_room', models.CharField(blank=True, max_length=255)),
                ('target_room', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('is_fragile', models.BooleanField(default=False)),
                ('no_stack', models.BooleanField(default=False)),
                ('is_moved_to_target', models.BooleanField(default=False)),
                ('label_printed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'Boxes',
                'ordering': ['-box_number', '-id'],
                'indexes': [
                    models.Index(fields=['created_at'], name='box_created_at_idx'),
                    models.Index(fields=['current_room'], name='box_current_room_idx'),
                ],
            },
        ),
        # Items
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('box', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='inventory.box')),
            ],
            options={
                'ordering': ['name', 'id'],
                'indexes': [
                    models.Index(fields=['box', 'name'], name='item_box_name_idx'),
                ],
            },
        ),
    ]
