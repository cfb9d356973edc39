"""Default café menu loaded by the seed endpoint."""

from __future__ import annotations

_IMG = "https://images.unsplash.com/photo-{}?w=400"


def _item(id, category, name, price, description, photo, stock):
    return {
        "id": id,
        "category": category,
        "name": name,
        "price": price,
        "description": description,
        "image": _IMG.format(photo),
        "available": True,
        "stock": stock,
    }


DEFAULT_MENU: list[dict] = [
    _item("coffee_001", "coffee", "Hapiyo Latte", 25000,
          "Smooth latte dengan espresso blend khas Hapiyo", "1561047029-3000c68339ca", 50),
    _item("coffee_002", "coffee", "Cappuccino", 23000,
          "Classic cappuccino dengan foam sempurna", "1572442388796-11668a67e53d", 50),
    _item("coffee_003", "coffee", "Americano", 20000,
          "Espresso dengan air panas, bold dan rich", "1514432324607-a09d9b4aefdd", 50),
    _item("coffee_004", "coffee", "Espresso", 18000,
          "Shot espresso murni, intense flavor", "1510707577719-ae7c14805e3a", 50),
    _item("coffee_005", "coffee", "Hapiyo Mocha", 28000,
          "Latte dengan dark chocolate premium", "1578314675249-a6910f80cc4e", 40),
    _item("coffee_006", "coffee", "Caramel Macchiato", 28000,
          "Espresso dengan vanilla dan caramel drizzle", "1485808191679-5f86510681a2", 40),
    _item("non_coffee_001", "non-coffee", "Chocolate Hazelnut", 28000,
          "Rich chocolate dengan hazelnut premium", "1542990253-a781e04c0082", 30),
    _item("non_coffee_002", "non-coffee", "Matcha Latte", 26000,
          "Japanese matcha dengan susu creamy", "1536256263959-770b48d82b0a", 30),
    _item("non_coffee_003", "non-coffee", "Thai Tea", 22000,
          "Thai tea autentik dengan susu", "1558857563-c90f3d484f11", 30),
    _item("non_coffee_004", "non-coffee", "Taro Latte", 25000,
          "Creamy taro dengan susu segar", "1541658016709-82535e94bc69", 25),
    _item("snack_001", "snacks", "Butter Croissant", 20000,
          "Croissant butter fresh dari oven", "1555507036-ab1f4038808a", 20),
    _item("snack_002", "snacks", "Chocolate Croissant", 23000,
          "Croissant dengan filling chocolate", "1623334044303-241021148842", 15),
    _item("snack_003", "snacks", "Cinnamon Roll", 22000,
          "Soft cinnamon roll dengan cream cheese frosting", "1609127102567-8a9a21dc27d8", 15),
    _item("snack_004", "snacks", "Banana Bread", 18000,
          "Homemade banana bread moist dan lembut", "1605286978633-2dec93d83a49", 12),
    _item("meal_001", "meals", "Chicken Sandwich", 35000,
          "Grilled chicken dengan fresh vegetables", "1528735602780-2552fd46c7af", 10),
    _item("meal_002", "meals", "Beef Burger", 45000,
          "Homemade beef patty dengan special sauce", "1568901346375-23c9450c58cd", 10),
    _item("meal_003", "meals", "Pasta Carbonara", 42000,
          "Creamy carbonara dengan bacon crispy", "1612874742237-6526221588e3", 8),
    _item("meal_004", "meals", "Nasi Goreng Special", 38000,
          "Nasi goreng dengan telur, ayam, dan kerupuk", "1512058564366-18510be2db19", 15),
]

__all__ = ["DEFAULT_MENU"]
