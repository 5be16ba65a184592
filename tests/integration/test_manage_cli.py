"""End-to-end tests for the storefront CLI against file-backed storage."""

import json

import manage
import pytest
from shared.storage import FileStorage


def _run(capsys, storage_dir, *args):
    manage.main(["--storage-dir", str(storage_dir), *args])
    return capsys.readouterr().out


@pytest.fixture()
def catalog_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        json.dumps(
            [
                {"id": "p1", "name": "Pad Thai", "description": "Noodles", "price": 12.5, "reviews": []},
                {
                    "id": "p2",
                    "name": "Green Curry",
                    "description": "Coconut",
                    "price": 11.0,
                    "reviews": [{"id": "r1", "rating": 5, "comment": "Great", "userId": "u1"}],
                },
            ]
        )
    )
    return path


class TestCartCommands:
    def test_empty_cart(self, tmp_path, capsys):
        assert "Your cart is empty" in _run(capsys, tmp_path, "cart", "show")

    def test_add_merges_and_persists(self, tmp_path, capsys):
        _run(capsys, tmp_path, "cart", "add", "a", "Pad Thai", "12.5", "--image-url", "/a.jpg")
        out = _run(capsys, tmp_path, "cart", "add", "a", "Pad Thai", "12.5", "--image-url", "/a.jpg")

        assert "Items: 2  Total: $25.00" in out
        snapshot = json.loads(FileStorage(tmp_path).read("cart"))
        assert snapshot == [{"id": "a", "name": "Pad Thai", "price": 12.5, "imageUrl": "/a.jpg", "quantity": 2}]

    def test_set_quantity_zero_empties_cart(self, tmp_path, capsys):
        _run(capsys, tmp_path, "cart", "add", "a", "Pad Thai", "12.5")
        out = _run(capsys, tmp_path, "cart", "set-quantity", "a", "0")
        assert "Your cart is empty" in out

    def test_remove(self, tmp_path, capsys):
        _run(capsys, tmp_path, "cart", "add", "a", "Pad Thai", "12.5")
        _run(capsys, tmp_path, "cart", "add", "b", "Green Curry", "11")
        out = _run(capsys, tmp_path, "cart", "remove", "a")
        assert "Green Curry" in out
        assert "Pad Thai" not in out

    def test_corrupt_cart_file_starts_empty(self, tmp_path, capsys):
        (tmp_path / "cart.json").write_text("{corrupt")
        assert "Your cart is empty" in _run(capsys, tmp_path, "cart", "show")

    def test_negative_price_is_reported(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            _run(capsys, tmp_path, "cart", "add", "a", "Pad Thai", "-1")
        assert exc.value.code == 1
        assert "Invalid input" in capsys.readouterr().out


class TestMenuCommands:
    def test_list_sorted_by_price(self, tmp_path, capsys, catalog_file):
        out = _run(capsys, tmp_path, "menu", "list", str(catalog_file), "--sort", "price-asc")
        lines = out.strip().splitlines()
        assert lines[0].startswith("p2  Green Curry")
        assert lines[1].startswith("p1  Pad Thai")

    def test_list_with_search(self, tmp_path, capsys, catalog_file):
        out = _run(capsys, tmp_path, "menu", "list", str(catalog_file), "--search", "coconut")
        assert "Green Curry" in out
        assert "Pad Thai" not in out

    def test_add_menu_product_to_cart(self, tmp_path, capsys, catalog_file):
        out = _run(capsys, tmp_path, "menu", "add", str(catalog_file), "p1")
        assert "Items: 1  Total: $12.50" in out
        snapshot = json.loads(FileStorage(tmp_path).read("cart"))
        assert snapshot[0]["id"] == "p1"
        assert snapshot[0]["imageUrl"].endswith("/api/products/p1/image")

    def test_add_unknown_product(self, tmp_path, capsys, catalog_file):
        with pytest.raises(SystemExit):
            _run(capsys, tmp_path, "menu", "add", str(catalog_file), "p404")


class TestSessionCommands:
    def test_signed_out(self, tmp_path, capsys):
        assert "Not signed in" in _run(capsys, tmp_path, "session", "show")

    def test_signed_in_then_logout(self, tmp_path, capsys):
        storage = FileStorage(tmp_path)
        storage.write("token", "jwt-token")
        storage.write("user", json.dumps({"id": "u1", "name": "Ana", "email": "ana@example.com", "role": "user"}))

        assert "Signed in as Ana (user)" in _run(capsys, tmp_path, "session", "show")
        assert "Not signed in" in _run(capsys, tmp_path, "session", "logout")
        assert storage.read("token") is None
