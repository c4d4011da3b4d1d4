from datetime import date

import pytest

from conftest import API, add_transaction, register


def budget_payload(categories, month="2024-06", total=3000, food=900, shopping=600):
    return {
        "month": month,
        "totalBudget": total,
        "categoryBudgets": [
            {"categoryId": categories["Food & Dining"]["id"], "budgetAmount": food},
            {"categoryId": categories["Shopping"]["id"], "budgetAmount": shopping},
        ],
    }


@pytest.mark.asyncio
async def test_create_and_read_with_spending(client, auth_headers, categories):
    created = await client.post(f"{API}/budgets/", json=budget_payload(categories), headers=auth_headers)
    assert created.status_code == 200
    budget = created.json()["budget"]
    assert budget["month"] == "2024-06"
    assert budget["year"] == 2024
    assert [cb["category"]["name"] for cb in budget["categoryBudgets"]] == ["Food & Dining", "Shopping"]

    await add_transaction(client, auth_headers, categories["Food & Dining"], 120, date(2024, 6, 2))
    await add_transaction(client, auth_headers, categories["Transportation"], 30, date(2024, 6, 2))
    await add_transaction(client, auth_headers, categories["Food & Dining"], 500, date(2024, 7, 1))

    detail = (await client.get(f"{API}/budgets/2024-06", headers=auth_headers)).json()
    assert detail["totalSpent"] == 150
    food = detail["categoryBudgets"][0]
    assert (food["spent"], food["remaining"]) == (120, 780)


@pytest.mark.asyncio
async def test_posting_again_replaces_the_month(client, auth_headers, categories):
    await client.post(f"{API}/budgets/", json=budget_payload(categories), headers=auth_headers)
    replaced = await client.post(
        f"{API}/budgets/",
        json={"month": "2024-06", "totalBudget": 1000, "categoryBudgets": [
            {"categoryId": categories["Food & Dining"]["id"], "budgetAmount": 400},
        ]},
        headers=auth_headers,
    )
    assert replaced.status_code == 200

    budgets = (await client.get(f"{API}/budgets/?month=2024-06", headers=auth_headers)).json()
    assert len(budgets) == 1
    assert budgets[0]["totalBudget"] == 1000
    assert [cb["budgetAmount"] for cb in budgets[0]["categoryBudgets"]] == [400]


@pytest.mark.asyncio
async def test_category_sum_above_total_is_rejected(client, auth_headers, categories):
    response = await client.post(
        f"{API}/budgets/", json=budget_payload(categories, total=1000, food=700, shopping=400), headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Sum of category budgets cannot exceed total budget"
    assert (await client.get(f"{API}/budgets/2024-06", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_failed_replace_keeps_the_previous_budget(client, auth_headers, categories):
    await client.post(f"{API}/budgets/", json=budget_payload(categories), headers=auth_headers)
    bad = await client.post(
        f"{API}/budgets/", json=budget_payload(categories, total=100), headers=auth_headers
    )
    assert bad.status_code == 400
    kept = (await client.get(f"{API}/budgets/2024-06", headers=auth_headers)).json()
    assert kept["totalBudget"] == 3000
    assert len(kept["categoryBudgets"]) == 2


@pytest.mark.asyncio
async def test_foreign_and_duplicate_categories_are_rejected(client, auth_headers, categories):
    other = await register(client, email="eve@example.com", name="Eve")
    foreign = await client.post(f"{API}/budgets/", json=budget_payload(categories), headers=other)
    assert foreign.status_code == 400

    food_id = categories["Food & Dining"]["id"]
    duplicate = await client.post(
        f"{API}/budgets/",
        json={"month": "2024-06", "totalBudget": 1000, "categoryBudgets": [
            {"categoryId": food_id, "budgetAmount": 100},
            {"categoryId": food_id, "budgetAmount": 200},
        ]},
        headers=auth_headers,
    )
    assert duplicate.status_code == 400


@pytest.mark.asyncio
async def test_malformed_month(client, auth_headers, categories):
    response = await client.post(f"{API}/budgets/", json=budget_payload(categories, month="2024-6"), headers=auth_headers)
    assert response.status_code == 422
    assert (await client.get(f"{API}/budgets/June", headers=auth_headers)).status_code == 400


@pytest.mark.asyncio
async def test_partial_update(client, auth_headers, categories):
    await client.post(f"{API}/budgets/", json=budget_payload(categories), headers=auth_headers)

    total_only = await client.put(f"{API}/budgets/2024-06", json={"totalBudget": 2000}, headers=auth_headers)
    assert total_only.status_code == 200
    assert total_only.json()["budget"]["totalBudget"] == 2000
    assert len(total_only.json()["budget"]["categoryBudgets"]) == 2

    too_small = await client.put(f"{API}/budgets/2024-06", json={"totalBudget": 1000}, headers=auth_headers)
    assert too_small.status_code == 400

    lines = await client.put(
        f"{API}/budgets/2024-06",
        json={"categoryBudgets": [
            {"categoryId": categories["Food & Dining"]["id"], "budgetAmount": 1000},
            {"categoryId": categories["Healthcare"]["id"], "budgetAmount": 250},
        ]},
        headers=auth_headers,
    )
    assert lines.status_code == 200
    assert [(cb["category"]["name"], cb["budgetAmount"]) for cb in lines.json()["budget"]["categoryBudgets"]] == [
        ("Food & Dining", 1000),
        ("Healthcare", 250),
    ]

    missing = await client.put(f"{API}/budgets/2024-07", json={"totalBudget": 10}, headers=auth_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_list_and_delete(client, auth_headers, categories):
    for month in ("2024-05", "2024-06", "2024-04"):
        await client.post(f"{API}/budgets/", json=budget_payload(categories, month=month), headers=auth_headers)

    listing = (await client.get(f"{API}/budgets/", headers=auth_headers)).json()
    assert [b["month"] for b in listing] == ["2024-06", "2024-05", "2024-04"]

    assert (await client.delete(f"{API}/budgets/2024-05", headers=auth_headers)).status_code == 200
    assert (await client.delete(f"{API}/budgets/2024-05", headers=auth_headers)).status_code == 404
    assert len((await client.get(f"{API}/budgets/", headers=auth_headers)).json()) == 2
