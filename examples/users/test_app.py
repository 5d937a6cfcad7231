"""Tests for the users example: lookups, inserts, maintenance mode."""

from perch.testing import (
    TestClient,
    assert_empty_envelope,
    assert_envelope_error,
    assert_envelope_ok,
)


class TestFetchUser:
    """GET /v1/user: single lookup by name."""

    async def test_known_user(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/user?name=Des")
            assert response.status == 200
            assert response.body == b'{"success":true,"value":{"name":"Des","age":32}}'

    async def test_unknown_user_is_null_value(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/user?name=Unknown")
            assert response.status == 200
            assert response.body == b'{"success":true,"value":null}'

    async def test_repeated_name_uses_last(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/user?name=Nobody&name=Des")
            assert_envelope_ok(response, {"name": "Des", "age": 32})

    async def test_missing_name_is_null_value(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/user")
            assert_envelope_ok(response, None)

    async def test_post_to_get_only_path_is_405(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.post("/v1/user?name=Des")
            assert_envelope_error(response, status=405)
            assert response.header("allow") == "DELETE, GET"


class TestListUsers:
    async def test_lists_seeded_users(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/users")
            assert_envelope_ok(
                response,
                [
                    {"name": "Des", "age": 32},
                    {"name": "Maria", "age": 21},
                    {"name": "Preston", "age": 23},
                ],
            )

    async def test_glester(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v1/glester")
            assert_envelope_ok(response, {"name": "deglester", "age": 32})


class TestInsertUser:
    """POST /v1/put: insert from query parameters."""

    async def test_insert_returns_user(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.post("/v1/put?name=Maria&age=21")
            assert response.status == 200
            assert response.body == b'{"success":true,"value":{"name":"Maria","age":21}}'

    async def test_inserted_user_is_visible(self, example_server) -> None:
        async with TestClient(example_server) as client:
            await client.post("/v1/put?name=Ana&age=40")
            response = await client.get("/v1/user?name=Ana")
            assert_envelope_ok(response, {"name": "Ana", "age": 40})

    async def test_bad_age_is_500(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.post("/v1/put?name=Ana&age=old")
            assert_envelope_error(
                response,
                status=500,
                error="invalid literal for int() with base 10: 'old'",
            )


class TestRemoveUser:
    async def test_delete_answers_empty_envelope(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.delete("/v1/user?name=Des")
            assert_empty_envelope(response, status=200)

            lookup = await client.get("/v1/user?name=Des")
            assert_envelope_ok(lookup, None)


class TestMaintenanceMode:
    async def test_writes_cancelled(self, example_server) -> None:
        maintenance = example_server.events[-1]
        maintenance.enabled = True
        async with TestClient(example_server) as client:
            response = await client.post("/v1/put?name=Ana&age=40")
            assert_envelope_error(
                response, status=403, error="Request has been cancelled internally"
            )

            lookup = await client.get("/v1/user?name=Ana")
            assert_envelope_ok(lookup, None)

    async def test_reads_still_served(self, example_server) -> None:
        example_server.events[-1].enabled = True
        async with TestClient(example_server) as client:
            response = await client.get("/v1/glester")
            assert response.status == 200


class TestUnknownPath:
    async def test_unknown_path_is_404_envelope(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/v2/user")
            assert_envelope_error(
                response, status=404, error="No route matches GET '/v2/user'"
            )
