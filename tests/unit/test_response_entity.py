"""
Tests for ResponseEntity.
"""

from loggable.web.response import ResponseEntity


class TestResponseEntity:
    """Tests for ResponseEntity class."""

    def test_ok(self):
        response = ResponseEntity.ok({"message": "Success"})
        assert response.status == 200
        assert response.body == {"message": "Success"}
        assert response.headers == {}

    def test_created_with_headers(self):
        response = ResponseEntity.created(
            {"id": 1}, headers={"Location": "/api/users/1"}
        )
        assert response.status == 201
        assert response.headers == {"Location": "/api/users/1"}

    def test_no_content(self):
        response = ResponseEntity.no_content()
        assert response.status == 204
        assert response.body is None
