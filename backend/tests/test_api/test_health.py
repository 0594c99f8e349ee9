def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "healthy"
    assert data["environment"] == "local"
    assert data["config_cache"]["ttl"] == 30


def test_health_reports_loaded_config(client, question_id):
    """Test that the config cache shows as loaded after a submission."""
    client.post("/api/answers", json={"question_id": question_id, "text": "pizza"})
    assert client.get("/api/health").json()["config_cache"]["loaded"] is True


def test_root_endpoint(client):
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health_check"] == "/api/health"
