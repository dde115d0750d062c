"""
Integration tests for ingredient, recipe, ingredient line and step endpoints.
"""
from decimal import Decimal

import pytest


def create_ingredient(client, **overrides):
    payload = {"name": "Spaghetti", "unit_cost": "0.002", "unit": "g", "allergens": ["gluten"]}
    payload.update(overrides)
    response = client.post("/api/ingredients", json=payload)
    assert response.status_code == 201
    return response.json()


def create_recipe(client, **overrides):
    payload = {"name": "Carbonara", "category": "main", "servings": 4, "prep_time": 25}
    payload.update(overrides)
    response = client.post("/api/recipes", json=payload)
    assert response.status_code == 201
    return response.json()


class TestIngredientsRouter:
    """Tests for /api/ingredients endpoints."""

    def test_list_empty(self, client):
        response = client.get("/api/ingredients")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_and_get(self, client):
        created = create_ingredient(client, supplier="Local Supplier")

        response = client.get(f"/api/ingredients/{created['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Spaghetti"
        assert Decimal(data["unit_cost"]) == Decimal("0.002")
        assert data["allergens"] == ["gluten"]
        assert data["supplier"] == "Local Supplier"

    def test_create_rejects_unknown_unit(self, client):
        response = client.post("/api/ingredients", json={"name": "Sand", "unit_cost": "1", "unit": "bucket"})

        assert response.status_code == 422

    def test_create_rejects_unknown_field(self, client):
        response = client.post(
            "/api/ingredients",
            json={"name": "Salt", "unit_cost": "0.001", "unit": "g", "colour": "white"},
        )

        assert response.status_code == 422

    def test_patch_is_partial(self, client):
        created = create_ingredient(client)

        response = client.patch(f"/api/ingredients/{created['id']}", json={"unit_cost": "0.003"})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["unit_cost"]) == Decimal("0.003")
        assert data["name"] == "Spaghetti"

    def test_patch_null_required_field(self, client):
        created = create_ingredient(client)

        response = client.patch(f"/api/ingredients/{created['id']}", json={"name": None})

        assert response.status_code == 422

    def test_not_found(self, client):
        assert client.get("/api/ingredients/999").status_code == 404
        assert client.patch("/api/ingredients/999", json={"name": "Ghost"}).status_code == 404
        assert client.delete("/api/ingredients/999").status_code == 404

    def test_delete(self, client):
        created = create_ingredient(client)

        response = client.delete(f"/api/ingredients/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/ingredients/{created['id']}").status_code == 404

    def test_delete_in_use_conflicts(self, client):
        ingredient = create_ingredient(client)
        recipe = create_recipe(client)
        client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "100", "unit": "g"},
        )

        response = client.delete(f"/api/ingredients/{ingredient['id']}")

        assert response.status_code == 409
        assert "cannot be deleted" in response.json()["detail"]


class TestRecipesRouter:
    """Tests for /api/recipes endpoints."""

    def test_create_has_no_costs(self, client):
        data = create_recipe(client, selling_price="14.00", equipment=["pot", "pan"])

        assert data["total_cost"] is None
        assert data["cost_per_serving"] is None
        assert data["profit_margin"] is None
        assert data["equipment"] == ["pot", "pan"]
        assert data["created_at"] is not None

    def test_create_rejects_derived_fields(self, client):
        response = client.post(
            "/api/recipes",
            json={"name": "Soup", "category": "soup", "servings": 2, "prep_time": 10, "total_cost": "1"},
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("field,value", [("servings", 0), ("prep_time", -5), ("category", "brunch")])
    def test_create_validation(self, client, field, value):
        payload = {"name": "Soup", "category": "soup", "servings": 2, "prep_time": 10}
        payload[field] = value

        response = client.post("/api/recipes", json=payload)

        assert response.status_code == 422

    def test_get_full_recipe(self, client):
        ingredient = create_ingredient(client)
        recipe = create_recipe(client)
        client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "400", "unit": "g"},
        )
        client.post(f"/api/recipes/{recipe['id']}/steps", json={"description": "Boil the pasta"})

        response = client.get(f"/api/recipes/{recipe['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Carbonara"
        assert len(data["ingredients"]) == 1
        assert data["ingredients"][0]["ingredient"]["name"] == "Spaghetti"
        assert data["steps"] == [
            {"id": data["steps"][0]["id"], "recipe_id": recipe["id"], "step_number": 1, "description": "Boil the pasta"}
        ]
        assert Decimal(data["total_cost"]) == Decimal("0.80")

    def test_list_with_filters(self, client):
        create_recipe(client, name="Carbonara", subcategory="italian")
        create_recipe(client, name="Margarita", category="cocktail", subcategory="tequila", servings=1)
        create_recipe(client, name="Amatriciana", subcategory="italian")

        response = client.get("/api/recipes", params={"category": "main", "sort_by": "name"})

        assert response.status_code == 200
        assert [r["name"] for r in response.json()] == ["Amatriciana", "Carbonara"]

        response = client.get("/api/recipes", params={"search": "marg"})
        assert [r["name"] for r in response.json()] == ["Margarita"]

    def test_list_rejects_unknown_sort(self, client):
        response = client.get("/api/recipes", params={"sort_by": "popularity"})

        assert response.status_code == 422

    def test_patch_servings_recalculates(self, client):
        ingredient = create_ingredient(client)
        recipe = create_recipe(client, selling_price="1.00")
        client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "400", "unit": "g"},
        )

        response = client.patch(f"/api/recipes/{recipe['id']}", json={"servings": 2})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["cost_per_serving"]) == Decimal("0.40")
        assert Decimal(data["profit_margin"]) == Decimal("60")

    def test_not_found(self, client):
        assert client.get("/api/recipes/999").status_code == 404
        assert client.patch("/api/recipes/999", json={"name": "Ghost"}).status_code == 404
        assert client.delete("/api/recipes/999").status_code == 404
        assert client.get("/api/recipes/999/ingredients").status_code == 404
        assert client.get("/api/recipes/999/steps").status_code == 404
        assert client.get("/api/recipes/999/costs").status_code == 404

    def test_delete_cascades(self, client):
        ingredient = create_ingredient(client)
        recipe = create_recipe(client)
        added = client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "100", "unit": "g"},
        ).json()
        step = client.post(f"/api/recipes/{recipe['id']}/steps", json={"description": "Mix"}).json()

        response = client.delete(f"/api/recipes/{recipe['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/recipes/{recipe['id']}").status_code == 404
        line_id = added["recipe_ingredient"]["id"]
        assert client.delete(f"/api/recipe-ingredients/{line_id}").status_code == 404
        assert client.delete(f"/api/steps/{step['id']}").status_code == 404
        assert client.delete(f"/api/ingredients/{ingredient['id']}").status_code == 204


class TestRecipeIngredientsRouter:
    """Tests for ingredient lines and the costs returned with each mutation."""

    @pytest.fixture
    def recipe(self, client):
        return create_recipe(client, selling_price="5.00")

    @pytest.fixture
    def spaghetti(self, client):
        return create_ingredient(client)

    def add(self, client, recipe_id, ingredient_id, quantity):
        return client.post(
            f"/api/recipes/{recipe_id}/ingredients",
            json={"ingredient_id": ingredient_id, "quantity": quantity, "unit": "g"},
        )

    def test_add_returns_line_and_costs(self, client, recipe, spaghetti):
        response = self.add(client, recipe["id"], spaghetti["id"], "500")

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["recipe_ingredient"]["recipe_id"] == recipe["id"]
        assert Decimal(data["recipe_costs"]["total_cost"]) == Decimal("1.00")
        assert Decimal(data["recipe_costs"]["cost_per_serving"]) == Decimal("0.25")
        assert Decimal(data["recipe_costs"]["profit_margin"]) == Decimal("95")

    def test_same_ingredient_twice(self, client, recipe, spaghetti):
        self.add(client, recipe["id"], spaghetti["id"], "500")
        data = self.add(client, recipe["id"], spaghetti["id"], "100").json()

        assert Decimal(data["recipe_costs"]["total_cost"]) == Decimal("1.20")
        assert Decimal(data["recipe_costs"]["cost_per_serving"]) == Decimal("0.30")
        assert Decimal(data["recipe_costs"]["profit_margin"]) == Decimal("94")

        lines = client.get(f"/api/recipes/{recipe['id']}/ingredients").json()
        assert [Decimal(line["quantity"]) for line in lines] == [Decimal("500"), Decimal("100")]

    def test_add_to_missing_recipe(self, client, spaghetti):
        response = self.add(client, 999, spaghetti["id"], "1")

        assert response.status_code == 404
        assert response.json()["detail"] == "Recipe not found"

    def test_add_missing_ingredient(self, client, recipe):
        response = self.add(client, recipe["id"], 999, "1")

        assert response.status_code == 404
        assert response.json()["detail"] == "Ingredient not found"

    def test_add_zero_quantity(self, client, recipe, spaghetti):
        response = self.add(client, recipe["id"], spaghetti["id"], "0")

        assert response.status_code == 422

    def test_update_line(self, client, recipe, spaghetti):
        line = self.add(client, recipe["id"], spaghetti["id"], "500").json()["recipe_ingredient"]

        response = client.patch(f"/api/recipe-ingredients/{line['id']}", json={"quantity": "1000"})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["recipe_ingredient"]["quantity"]) == Decimal("1000")
        assert Decimal(data["recipe_costs"]["total_cost"]) == Decimal("2.00")

    def test_update_cannot_move_line(self, client, recipe, spaghetti):
        line = self.add(client, recipe["id"], spaghetti["id"], "500").json()["recipe_ingredient"]

        response = client.patch(f"/api/recipe-ingredients/{line['id']}", json={"recipe_id": 2})

        assert response.status_code == 422

    def test_remove_line(self, client, recipe, spaghetti):
        line = self.add(client, recipe["id"], spaghetti["id"], "500").json()["recipe_ingredient"]

        response = client.delete(f"/api/recipe-ingredients/{line['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["recipe_ingredient"] is None
        assert Decimal(data["recipe_costs"]["total_cost"]) == 0
        assert Decimal(data["recipe_costs"]["cost_per_serving"]) == 0

    def test_missing_line(self, client):
        assert client.patch("/api/recipe-ingredients/999", json={"quantity": "1"}).status_code == 404
        assert client.delete("/api/recipe-ingredients/999").status_code == 404


class TestStepsRouter:
    """Tests for step endpoints."""

    def test_add_insert_move_delete(self, client):
        recipe = create_recipe(client)
        url = f"/api/recipes/{recipe['id']}/steps"
        first = client.post(url, json={"description": "Boil water"}).json()
        client.post(url, json={"description": "Plate"})

        inserted = client.post(url, json={"description": "Cook pasta", "step_number": 2})
        assert inserted.status_code == 201
        assert inserted.json()["step_number"] == 2

        moved = client.patch(f"/api/steps/{first['id']}", json={"step_number": 3})
        assert moved.status_code == 200

        steps = client.get(url).json()
        assert [(s["step_number"], s["description"]) for s in steps] == [
            (1, "Cook pasta"),
            (2, "Plate"),
            (3, "Boil water"),
        ]

        assert client.delete(f"/api/steps/{steps[0]['id']}").status_code == 204
        steps = client.get(url).json()
        assert [(s["step_number"], s["description"]) for s in steps] == [(1, "Plate"), (2, "Boil water")]

    def test_step_number_out_of_range(self, client):
        recipe = create_recipe(client)
        url = f"/api/recipes/{recipe['id']}/steps"

        response = client.post(url, json={"description": "Skip ahead", "step_number": 3})

        assert response.status_code == 422
        assert "out of range" in response.json()["detail"]
        assert client.get(url).json() == []

    def test_missing_step(self, client):
        assert client.patch("/api/steps/999", json={"description": "x"}).status_code == 404
        assert client.delete("/api/steps/999").status_code == 404

    def test_add_step_to_missing_recipe(self, client):
        response = client.post("/api/recipes/999/steps", json={"description": "Orphan"})

        assert response.status_code == 404


class TestCostsRouter:
    """Tests for /api/recipes/{id}/costs."""

    def test_recalculate(self, client):
        recipe = create_recipe(client)

        response = client.post(f"/api/recipes/{recipe['id']}/costs")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_cost"]) == 0
        assert data["profit_margin"] is None

    def test_recalculate_missing_recipe(self, client):
        response = client.post("/api/recipes/999/costs")

        assert response.status_code == 404
        assert response.json() == {"detail": "Recipe not found"}

    def test_breakdown(self, client):
        spaghetti = create_ingredient(client)
        eggs = create_ingredient(client, name="Eggs", unit_cost="0.25", unit="pcs", allergens=["eggs"])
        recipe = create_recipe(client, selling_price="10.00")
        for ingredient, quantity, unit in ((spaghetti, "400", "g"), (eggs, "4", "pcs")):
            client.post(
                f"/api/recipes/{recipe['id']}/ingredients",
                json={"ingredient_id": ingredient["id"], "quantity": quantity, "unit": unit},
            )

        response = client.get(f"/api/recipes/{recipe['id']}/costs")

        assert response.status_code == 200
        data = response.json()
        assert data["recipe_name"] == "Carbonara"
        assert Decimal(data["total_cost"]) == Decimal("1.80")
        assert Decimal(data["cost_per_serving"]) == Decimal("0.45")
        assert Decimal(data["profit_margin"]) == Decimal("95.5")
        assert [item["ingredient_name"] for item in data["ingredient_breakdown"]] == ["Spaghetti", "Eggs"]
        assert [Decimal(item["line_cost"]) for item in data["ingredient_breakdown"]] == [
            Decimal("0.8"),
            Decimal("1.00"),
        ]


class TestPatchValidation:
    """Partial updates follow the same text and number rules as creation."""

    def test_blank_recipe_name_rejected(self, client):
        recipe = create_recipe(client)

        response = client.patch(f"/api/recipes/{recipe['id']}", json={"name": "   "})

        assert response.status_code == 422
        assert client.get(f"/api/recipes/{recipe['id']}").json()["name"] == "Carbonara"

    def test_recipe_name_is_stripped(self, client):
        recipe = create_recipe(client)

        response = client.patch(f"/api/recipes/{recipe['id']}", json={"name": "  Cacio e Pepe "})

        assert response.status_code == 200
        assert response.json()["name"] == "Cacio e Pepe"

    def test_blank_ingredient_name_rejected(self, client):
        ingredient = create_ingredient(client)

        response = client.patch(f"/api/ingredients/{ingredient['id']}", json={"name": "\t "})

        assert response.status_code == 422
        assert client.get(f"/api/ingredients/{ingredient['id']}").json()["name"] == "Spaghetti"

    def test_blank_step_description_rejected(self, client):
        recipe = create_recipe(client)
        step = client.post(f"/api/recipes/{recipe['id']}/steps", json={"description": "Boil water"}).json()

        response = client.patch(f"/api/steps/{step['id']}", json={"description": "   "})

        assert response.status_code == 422
        assert client.get(f"/api/recipes/{recipe['id']}/steps").json()[0]["description"] == "Boil water"


class TestDecimalBounds:
    """Amounts outside the stored precision are rejected before costing runs."""

    def test_huge_quantity_rejected(self, client):
        ingredient = create_ingredient(client, unit_cost="10")
        recipe = create_recipe(client)

        response = client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "1E+24", "unit": "g"},
        )

        assert response.status_code == 422
        assert client.get(f"/api/recipes/{recipe['id']}/ingredients").json() == []

    def test_huge_quantity_rejected_on_update(self, client):
        ingredient = create_ingredient(client)
        recipe = create_recipe(client)
        line = client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "100", "unit": "g"},
        ).json()["recipe_ingredient"]

        response = client.patch(f"/api/recipe-ingredients/{line['id']}", json={"quantity": "1E+24"})

        assert response.status_code == 422

    @pytest.mark.parametrize("unit_cost", ["1E+12", "0.00001"])
    def test_unit_cost_precision(self, client, unit_cost):
        response = client.post("/api/ingredients", json={"name": "Saffron", "unit_cost": unit_cost, "unit": "g"})

        assert response.status_code == 422

    @pytest.mark.parametrize("selling_price", ["1E+20", "4.999"])
    def test_selling_price_precision(self, client, selling_price):
        recipe = create_recipe(client)

        response = client.patch(f"/api/recipes/{recipe['id']}", json={"selling_price": selling_price})

        assert response.status_code == 422

    def test_largest_amounts_still_cost(self, client):
        ingredient = create_ingredient(client, unit_cost="999999.9999")
        recipe = create_recipe(client, servings=1, selling_price="99999999.99")

        response = client.post(
            f"/api/recipes/{recipe['id']}/ingredients",
            json={"ingredient_id": ingredient["id"], "quantity": "999999.9999", "unit": "g"},
        )

        assert response.status_code == 201
        costs = response.json()["recipe_costs"]
        # 999999.9999 squared is 999999999800.00000001
        assert Decimal(costs["total_cost"]) == Decimal("999999999800.0000")
        assert costs["profit_margin"] is not None
