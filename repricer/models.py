import uuid

from django.db import models
from django.db.models import Q


class BuyBoxStatus(models.TextChoices):
    WON = 'won', 'Won'
    LOST = 'lost', 'Lost'
    UNKNOWN = 'unknown', 'Unknown'


class Product(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)
    sku = models.CharField(max_length=100)
    takealot_offer_id = models.CharField(max_length=64, null=True, blank=True)
    title = models.CharField(max_length=500, blank=True, default='')
    current_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cost_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    stock_quantity = models.IntegerField(default=0)
    image_url = models.CharField(max_length=1000, null=True, blank=True)
    buy_box_status = models.CharField(
        max_length=10, choices=BuyBoxStatus.choices, default=BuyBoxStatus.UNKNOWN,
    )
    is_active = models.BooleanField(default=True)
    last_synced_at = models.DateTimeField(null=True, blank=True)
    last_repriced_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        constraints = [
            models.UniqueConstraint(
                fields=['user_id', 'sku'],
                condition=Q(is_active=True),
                name='uniq_active_product_sku',
            ),
            models.UniqueConstraint(
                fields=['user_id', 'takealot_offer_id'],
                condition=Q(is_active=True),
                name='uniq_active_product_offer',
            ),
        ]

    def __str__(self):
        return f"{self.sku} - {self.title}"


class PriceHistory(models.Model):
    """Append-only record of an observed price change."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='price_history')
    old_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    new_price = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'price_history'
        ordering = ['-created_at']
        verbose_name_plural = 'price history'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Price history rows are immutable")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_id}: {self.old_price} -> {self.new_price}"


class WebhookEvent(models.Model):
    user_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    product = models.ForeignKey(
        Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='webhook_events',
    )
    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    signature_verified = models.BooleanField(default=False)
    processed = models.BooleanField(default=False)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'webhook_events'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.event_type} ({self.created_at})"
