from restaurant_api.models.user import User
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
