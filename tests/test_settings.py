async def test_settings_created_with_defaults(client, owner, login):
    response = await client.get("/api/settings", headers=await login(owner.email))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == owner.id
    assert data["payment_reminders"] is True


async def test_partial_update_keeps_other_fields(client, owner, login):
    headers = await login(owner.email)
    before = (await client.get("/api/settings", headers=headers)).json()["data"]

    response = await client.put(
        "/api/settings",
        json={"payment_reminder_days": 7, "date_format": "YYYY-MM-DD"},
        headers=headers,
    )

    data = response.json()["data"]
    assert data["payment_reminder_days"] == 7
    assert data["date_format"] == "YYYY-MM-DD"
    assert data["currency"] == before["currency"]


async def test_invalid_date_format_is_rejected(client, owner, login):
    response = await client.put(
        "/api/settings",
        json={"date_format": "YY"},
        headers=await login(owner.email),
    )

    assert response.status_code == 422
