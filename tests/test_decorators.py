# tests/test_decorators.py
def test_login_required_retorna_401(client):
    for url in ("/api/services", "/api/contracts", "/api/payments", "/api/dashboard/stats", "/api/settings"):
        resp = client.get(url)
        assert resp.status_code == 401, url
        assert resp.get_json() == {"error": "Não autorizado"}


def test_admin_required_bloqueia_gerente(logged_client):
    resp = logged_client.put("/api/settings", json={"companyName": "X"})
    assert resp.status_code == 403


def test_admin_required_sem_login(client):
    assert client.put("/api/settings", json={"companyName": "X"}).status_code == 401
