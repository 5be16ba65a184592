"""schema.org structured data for the menu page."""

import json

from shared.config import settings


def menu_item(product):
    return {
        "@type": "MenuItem",
        "name": product.name,
        "description": product.description,
        "price": f"${product.price:.2f}",
        "image": product.image_url,
    }


def menu_structured_data(products, restaurant_name=None):
    return {
        "@context": "https://schema.org",
        "@type": "Restaurant",
        "name": restaurant_name or settings.restaurant_name,
        "image": "/logo.png",
        "menu": {
            "@type": "Menu",
            "hasMenuSection": {
                "@type": "MenuSection",
                "name": "Full Menu",
                "hasMenuItem": [menu_item(product) for product in products],
            },
        },
    }


def menu_structured_data_json(products, restaurant_name=None):
    return json.dumps(menu_structured_data(products, restaurant_name))
