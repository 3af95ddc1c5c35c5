from core.config import settings


async def test_admin_requires_login(client):
    response = await client.get("/admin/", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"].endswith("/admin/login")


async def test_admin_login_is_disabled_without_password(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)

    response = await client.post(
        "/admin/login",
        data={"username": settings.ADMIN_USERNAME, "password": ""},
        follow_redirects=False,
    )

    assert response.status_code != 302


async def test_admin_login(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3cret")

    response = await client.post(
        "/admin/login",
        data={"username": settings.ADMIN_USERNAME, "password": "s3cret"},
        follow_redirects=False,
    )

    assert response.status_code == 302
