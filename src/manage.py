"""Storefront client CLI.

Drives the cart and the signed-in session against file-backed storage, the
same way the storefront pages do through the shared store instances.

Usage:
    python src/manage.py cart show
    python src/manage.py cart add a "Pad Thai" 12.5 --image-url /a.jpg
    python src/manage.py cart set-quantity a 3
    python src/manage.py cart remove a
    python src/manage.py menu list products.json --search thai --sort price-asc
    python src/manage.py menu add products.json a
    python src/manage.py session show
    python src/manage.py session logout
"""

import argparse
import json
import sys
from pathlib import Path

from protean.exceptions import ValidationError

from shared.config import settings
from shared.storage import FileStorage
from shared.utils.domains import get_domain
from shared.utils.logging import bind_session, clear_session


def _print_cart(store):
    if not store.items:
        print("Your cart is empty")
        return
    for item in store.items:
        print(f"{item.product_id}  {item.name}  x{item.quantity}  ${item.subtotal:.2f}")
    print(f"Items: {store.item_count}  Total: ${store.total:.2f}")


def _load_products(path):
    from menu.product import parse_products

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_products(payload)


def run_cart(args, storage):
    from cart.cart import CartLineItem
    from cart.store import CartStore

    with get_domain("cart").domain_context():
        store = CartStore(storage)
        if args.action == "add":
            store.add_item(
                CartLineItem(
                    product_id=args.product_id,
                    name=args.name,
                    price=args.price,
                    image_url=args.image_url or settings.api.image_url(args.product_id),
                    quantity=1,
                )
            )
        elif args.action == "remove":
            store.remove_item(args.product_id)
        elif args.action == "set-quantity":
            store.update_quantity(args.product_id, args.quantity)
        _print_cart(store)


def run_menu(args, storage):
    from cart.store import CartStore
    from menu.listing import filter_and_sort

    with get_domain("menu").domain_context():
        products = _load_products(args.payload)

    if args.action == "list":
        for product in filter_and_sort(products, args.search, args.sort):
            print(f"{product.product_id}  {product.name}  ${product.price:.2f}  ({product.average_rating:.1f})")
        return

    product = next((p for p in products if str(p.product_id) == args.product_id), None)
    if product is None:
        print(f"No product {args.product_id!r} in {args.payload}")
        raise SystemExit(1)

    with get_domain("cart").domain_context():
        store = CartStore(storage)
        store.add_product(product)
        _print_cart(store)


def run_session(args, storage):
    from identity.session import AuthSession

    with get_domain("identity").domain_context():
        session = AuthSession(storage)
        session.check()
        if args.action == "logout":
            session.logout()
        if session.is_authenticated:
            print(f"Signed in as {session.user.name or session.user.email} ({session.user.role})")
        else:
            print("Not signed in")


def build_parser():
    parser = argparse.ArgumentParser(description="Storefront client")
    parser.add_argument(
        "--storage-dir",
        default=str(settings.storage_dir),
        help="Directory holding the durable client state (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    cart_parser = subparsers.add_parser("cart", help="Inspect and change the cart")
    cart_actions = cart_parser.add_subparsers(dest="action", required=True)
    cart_actions.add_parser("show", help="Show the cart")
    add_parser = cart_actions.add_parser("add", help="Add a product to the cart")
    add_parser.add_argument("product_id")
    add_parser.add_argument("name")
    add_parser.add_argument("price", type=float)
    add_parser.add_argument("--image-url")
    remove_parser = cart_actions.add_parser("remove", help="Remove a product from the cart")
    remove_parser.add_argument("product_id")
    quantity_parser = cart_actions.add_parser("set-quantity", help="Change a line item's quantity")
    quantity_parser.add_argument("product_id")
    quantity_parser.add_argument("quantity", type=int)

    menu_parser = subparsers.add_parser("menu", help="Browse a saved catalog payload")
    menu_actions = menu_parser.add_subparsers(dest="action", required=True)
    list_parser = menu_actions.add_parser("list", help="List products")
    list_parser.add_argument("payload", help="JSON file saved from GET /api/products")
    list_parser.add_argument("--search", default="")
    list_parser.add_argument("--sort", choices=["price-asc", "price-desc", "rating"], default="rating")
    menu_add_parser = menu_actions.add_parser("add", help="Add a menu product to the cart")
    menu_add_parser.add_argument("payload", help="JSON file saved from GET /api/products")
    menu_add_parser.add_argument("product_id")

    session_parser = subparsers.add_parser("session", help="Inspect the signed-in session")
    session_parser.add_argument("action", choices=["show", "logout"])

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    storage = FileStorage(args.storage_dir)
    bind_session(storage_dir=args.storage_dir, command=args.command)

    try:
        if args.command == "cart":
            run_cart(args, storage)
        elif args.command == "menu":
            run_menu(args, storage)
        elif args.command == "session":
            run_session(args, storage)
    except ValidationError as exc:
        print(f"Invalid input: {exc.messages}")
        sys.exit(1)
    finally:
        clear_session()


if __name__ == "__main__":
    main()
