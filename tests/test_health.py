"""
Tests for health endpoint
"""


def test_health_endpoint(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "storageMode" in data


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Buziz Office" in response.json()["message"]
