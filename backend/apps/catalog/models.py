from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

DEFAULT_PRODUCT_IMAGE = "default.png"


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)

    def __str__(self):
        return self.name


class Product(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    quantity = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    price = models.DecimalField(max_digits=10, decimal_places=2)
    # Percentage, 0-100
    discount = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    # Derived from price and discount by the service layer
    special_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    image = models.CharField(max_length=255, default=DEFAULT_PRODUCT_IMAGE)
    # Deleting a category deletes its products
    category = models.ForeignKey(
        Category, on_delete=models.CASCADE, related_name="products"
    )

    def __str__(self):
        return self.name

    class Meta:
        indexes = [
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["price"], name="product_price_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["category", "name"], name="product_category_name_unique"
            ),
        ]
