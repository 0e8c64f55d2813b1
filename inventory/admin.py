from django.contrib import admin
from auditlog.registry import auditlog
from .box_utils import delete_box
from .models import Box, BoxNumberPool, Item

# Register models with auditlog for an audit trail of box numbering
# This tracks all create, update, and delete operations on these models
auditlog.register(Box, exclude_fields=['updated_at'])
auditlog.register(BoxNumberPool)
auditlog.register(Item, exclude_fields=['created_at'])


class ItemInline(admin.TabularInline):
    model = Item
    extra = 0
    fields = ("name", "description", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Box)
class BoxAdmin(admin.ModelAdmin):
    list_display = ('box_number', 'current_room', 'target_room', 'is_fragile', 'no_stack', 'is_moved_to_target', 'created_at')
    list_filter = ('is_fragile', 'no_stack', 'is_moved_to_target', 'label_printed')
    search_fields = ('box_number', 'uuid', 'current_room', 'target_room', 'description')
    readonly_fields = ('uuid', 'box_number', 'created_at', 'updated_at')
    inlines = [ItemInline]

    def has_add_permission(self, request):
        # Boxes only come from create_box(), which assigns the number
        return False

    def delete_model(self, request, obj):
        delete_box(obj)

    def delete_queryset(self, request, queryset):
        for box in queryset:
            delete_box(box)


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("name", "box", "created_at")
    list_select_related = ("box",)
    search_fields = ("name", "description", "box__current_room")
    readonly_fields = ("created_at",)


@admin.register(BoxNumberPool)
class BoxNumberPoolAdmin(admin.ModelAdmin):
    """
    Read-only view of the box number pool.

    Only ``inventory.box_numbers`` writes to the pool.
    """
    list_display = ("box_number", "is_available", "last_used_at", "created_at")
    list_filter = ("is_available",)
    readonly_fields = ("box_number", "is_available", "last_used_at", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
