from django.db import models
from django.utils import timezone
from django.utils.text import slugify


class ContentKind(models.Model):
    """
    A content-type category of the catalog (e.g. "post", "page").
    Only public kinds are counted by the block.
    """

    key = models.SlugField(max_length=40, unique=True)
    label = models.CharField(max_length=100, blank=True, help_text="Plural display label (e.g. Posts).")
    label_singular = models.CharField(max_length=100, blank=True)
    is_public = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Content kind"
        verbose_name_plural = "Content kinds"
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return self.label or self.key


class Tag(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Item(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PENDING = "pending", "Pending review"
        PRIVATE = "private", "Private"
        PUBLISH = "publish", "Published"

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True, blank=True)
    kind = models.ForeignKey(ContentKind, on_delete=models.PROTECT, related_name="items")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    published_at = models.DateTimeField(default=timezone.now, db_index=True)
    tags = models.ManyToManyField(Tag, blank=True, related_name="items")
    categories = models.ManyToManyField(Category, blank=True, related_name="items")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Item"
        verbose_name_plural = "Items"
        # Catalog default order: newest first.
        ordering = ["-published_at", "-id"]
        indexes = [
            models.Index(fields=["kind", "status"], name="idx_item_kind_status"),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.title)[:200] or "item"
            slug = base
            n = 2
            while Item.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{n}"
                n += 1
            self.slug = slug
        super().save(*args, **kwargs)

    @property
    def is_published(self) -> bool:
        return self.status == self.Status.PUBLISH
