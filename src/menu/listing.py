"""Menu listing: search and ordering of products."""

from enum import Enum


class SortOrder(Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING = "rating"


def matches(product, search_term):
    term = (search_term or "").lower()
    return term in product.name.lower() or term in (product.description or "").lower()


def filter_and_sort(products, search_term="", sort_by=SortOrder.RATING):
    """Products whose name or description contains ``search_term``, in ``sort_by`` order.

    ``rating`` ranks by the sum of review ratings, highest first, so a dish
    with many good reviews outranks one with a single perfect score.
    """
    sort_by = SortOrder(sort_by)
    selected = [product for product in products if matches(product, search_term)]

    if sort_by == SortOrder.PRICE_ASC:
        return sorted(selected, key=lambda product: product.price)
    if sort_by == SortOrder.PRICE_DESC:
        return sorted(selected, key=lambda product: product.price, reverse=True)
    return sorted(selected, key=lambda product: product.rating_total, reverse=True)
