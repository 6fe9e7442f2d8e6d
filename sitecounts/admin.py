from django.contrib import admin

from .models import Category, ContentKind, Item, Tag

admin.site.site_header = "Site counts administration"
admin.site.site_title = "Site counts admin"


@admin.register(ContentKind)
class ContentKindAdmin(admin.ModelAdmin):
    list_display = ("key", "label", "is_public", "published_counter", "sort_order")
    list_filter = ("is_public",)
    search_fields = ("key", "label")
    ordering = ("sort_order", "id")

    @admin.display(description="Published")
    def published_counter(self, obj: ContentKind) -> int:
        return obj.items.filter(status=Item.Status.PUBLISH).count()


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ("name", "slug")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("title", "kind", "status", "published_at", "updated_at")
    list_filter = ("kind", "status", "tags", "categories")
    search_fields = ("title", "slug")
    prepopulated_fields = {"slug": ("title",)}
    filter_horizontal = ("tags", "categories")
    date_hierarchy = "published_at"
    actions = ["publish_action", "unpublish_action"]

    @admin.action(description="Publish")
    def publish_action(self, request, queryset):
        queryset.update(status=Item.Status.PUBLISH)

    @admin.action(description="Move back to draft")
    def unpublish_action(self, request, queryset):
        queryset.update(status=Item.Status.DRAFT)
