"""Integration tests for metrics endpoint."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/shopping/groups")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "cesta_http_requests_total" in body
    assert "cesta_group_operations_total" in body
