"""
Test health endpoint for the image colors service.
"""


def test_health_check(test_client):
    """Test health check reports service identity."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()

    # Check required fields
    assert data["ok"] is True
    assert data["service"] == "imagecolors"
    assert data["version"] == "1.0.0"


def test_root_points_to_docs(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"
