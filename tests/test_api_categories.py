from datetime import date

import pytest

from conftest import API, add_transaction, register

NEW_CATEGORY = {"name": "Pets", "type": "expense", "color": "#123ABC", "icon": "🐶"}


@pytest.mark.asyncio
async def test_categories_are_ordered_by_type_then_name(client, auth_headers):
    categories = (await client.get(f"{API}/categories/", headers=auth_headers)).json()
    keys = [(c["type"], c["name"]) for c in categories]
    assert keys == sorted(keys)


@pytest.mark.asyncio
async def test_create_update_delete(client, auth_headers):
    created = await client.post(f"{API}/categories/", json=NEW_CATEGORY, headers=auth_headers)
    assert created.status_code == 201
    category_id = created.json()["id"]

    updated = await client.put(
        f"{API}/categories/{category_id}", json={**NEW_CATEGORY, "name": "Pet care"}, headers=auth_headers
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Pet care"

    deleted = await client.delete(f"{API}/categories/{category_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert (await client.get(f"{API}/categories/{category_id}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_duplicate_name_is_rejected(client, auth_headers):
    response = await client.post(f"{API}/categories/", json={**NEW_CATEGORY, "name": "Shopping"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_color_is_rejected(client, auth_headers):
    response = await client.post(f"{API}/categories/", json={**NEW_CATEGORY, "color": "red"}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_category_in_use_cannot_be_deleted(client, auth_headers, categories):
    food = categories["Food & Dining"]
    await add_transaction(client, auth_headers, food, 12.5, date(2024, 6, 3))
    response = await client.delete(f"{API}/categories/{food['id']}", headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_deleting_budgeted_category_drops_its_budget_line(client, auth_headers):
    category = (await client.post(f"{API}/categories/", json=NEW_CATEGORY, headers=auth_headers)).json()
    await client.post(
        f"{API}/budgets/",
        json={"month": "2024-06", "totalBudget": 500, "categoryBudgets": [{"categoryId": category["id"], "budgetAmount": 100}]},
        headers=auth_headers,
    )
    assert (await client.delete(f"{API}/categories/{category['id']}", headers=auth_headers)).status_code == 200

    budget = (await client.get(f"{API}/budgets/2024-06", headers=auth_headers)).json()
    assert budget["categoryBudgets"] == []
    assert budget["totalBudget"] == 500


@pytest.mark.asyncio
async def test_other_users_category_is_not_found(client, auth_headers, categories):
    other = await register(client, email="eve@example.com", name="Eve")
    food_id = categories["Food & Dining"]["id"]
    assert (await client.get(f"{API}/categories/{food_id}", headers=other)).status_code == 404
    assert (await client.delete(f"{API}/categories/{food_id}", headers=other)).status_code == 404


@pytest.mark.asyncio
async def test_type_of_category_in_use_cannot_change(client, auth_headers, categories):
    food = categories["Food & Dining"]
    await add_transaction(client, auth_headers, food, 20, date(2024, 6, 3))
    body = {"name": food["name"], "type": "income", "color": food["color"], "icon": food["icon"]}

    response = await client.put(f"{API}/categories/{food['id']}", json=body, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot change type of category with existing transactions"
    current = (await client.get(f"{API}/categories/{food['id']}", headers=auth_headers)).json()
    assert current["type"] == "expense"

    recolored = await client.put(
        f"{API}/categories/{food['id']}", json={**body, "type": "expense", "color": "#000000"}, headers=auth_headers
    )
    assert recolored.status_code == 200
    assert recolored.json()["color"] == "#000000"


@pytest.mark.asyncio
async def test_type_of_unused_category_can_change(client, auth_headers):
    category = (await client.post(f"{API}/categories/", json=NEW_CATEGORY, headers=auth_headers)).json()
    response = await client.put(
        f"{API}/categories/{category['id']}", json={**NEW_CATEGORY, "type": "income"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["type"] == "income"
