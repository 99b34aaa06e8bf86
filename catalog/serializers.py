from rest_framework import serializers

from .models import Category, Product, ProductImage, Review


class CategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug"]


class CategorySerializer(serializers.ModelSerializer):
    parent = CategoryBriefSerializer(read_only=True)
    children = serializers.SerializerMethodField()
    product_count = serializers.IntegerField(read_only=True)
    parent_id = serializers.PrimaryKeyRelatedField(
        source="parent",
        queryset=Category.objects.all(),
        write_only=True,
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "image",
            "is_active",
            "parent",
            "parent_id",
            "children",
            "product_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False}}

    def get_children(self, obj):
        return CategoryBriefSerializer(
            obj.children.filter(is_active=True), many=True
        ).data

    def validate(self, attrs):
        parent = attrs.get("parent")
        if self.instance and parent and parent.pk == self.instance.pk:
            raise serializers.ValidationError("A category cannot be its own parent.")
        return attrs


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ["id", "url", "public_id", "alt", "position"]


class ProductSerializer(serializers.ModelSerializer):
    category = CategoryBriefSerializer(read_only=True)
    category_id = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=Category.objects.all(),
        write_only=True,
        required=False,
        allow_null=True,
    )
    images = ProductImageSerializer(many=True, read_only=True)
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()
    in_stock = serializers.BooleanField(read_only=True)
    in_wishlist = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "short_description",
            "price",
            "compare_price",
            "cost_price",
            "sku",
            "barcode",
            "track_quantity",
            "quantity",
            "allow_backorder",
            "weight",
            "tags",
            "category",
            "category_id",
            "images",
            "is_active",
            "is_featured",
            "in_stock",
            "average_rating",
            "review_count",
            "in_wishlist",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "slug": {"required": False},
            "sku": {"required": False},
        }

    def _approved_reviews(self, obj):
        return [review for review in obj.reviews.all() if review.is_approved]

    def get_average_rating(self, obj):
        ratings = [review.rating for review in self._approved_reviews(obj)]
        if not ratings:
            return None
        return round(sum(ratings) / len(ratings), 1)

    def get_review_count(self, obj):
        return len(self._approved_reviews(obj))

    def get_in_wishlist(self, obj):
        wishlist_ids = self.context.get("wishlist_ids")
        if wishlist_ids is None:
            return None
        return obj.id in wishlist_ids

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if self.context.get("wishlist_ids") is None:
            data.pop("in_wishlist", None)
        return data

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price must be non-negative.")
        return value


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()
    product_id = serializers.IntegerField(write_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "product",
            "product_id",
            "user",
            "user_name",
            "rating",
            "title",
            "comment",
            "is_approved",
            "created_at",
        ]
        read_only_fields = ["id", "product", "user", "is_approved", "created_at"]

    def get_user_name(self, obj):
        return f"{obj.user.first_name} {obj.user.last_name}".strip()
