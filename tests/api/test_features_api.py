"""
API tests for feature toggles and orientation
"""
import pytest


class TestFeatureEndpoints:
    """Tests for /api/features"""

    @pytest.mark.asyncio
    async def test_get_features(self, async_client):
        response = await async_client.get("/api/features")

        assert response.status_code == 200
        assert response.json()["depth_mesh_mode"] == "OFF"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path,command,field",
        [
            ("/api/features/map", "set_map_enabled", "map_enabled"),
            ("/api/features/planes", "set_planes_enabled", "planes_enabled"),
            ("/api/features/wireframe", "set_wireframe_enabled", "wireframe_enabled"),
        ],
    )
    async def test_toggle(self, async_client, fake_engine, path, command, field):
        response = await async_client.post(path, json={"enabled": False})

        assert response.status_code == 200
        assert response.json()[field] is False
        assert fake_engine.calls[-1] == (command, False)

    @pytest.mark.asyncio
    async def test_depth_mesh_mode(self, async_client, fake_engine):
        response = await async_client.post("/api/features/depth-mesh", json={"mode": "RAW"})

        assert response.status_code == 200
        assert response.json()["depth_mesh_mode"] == "RAW"
        assert fake_engine.calls[-1][0] == "set_depth_mesh_mode"

    @pytest.mark.asyncio
    async def test_invalid_depth_mesh_mode(self, async_client):
        response = await async_client.post("/api/features/depth-mesh", json={"mode": "LIDAR"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_clear_map_and_mesh(self, async_client, fake_engine):
        await async_client.post("/api/features/clear-map")
        await async_client.post("/api/features/clear-mesh")

        assert fake_engine.calls[-2:] == [("clear_map_state",), ("clear_mesh_state",)]


class TestOrientationEndpoint:
    """Tests for /api/features/orientation"""

    @pytest.mark.asyncio
    async def test_startup_orientation_sent(self, daemon, fake_engine):
        assert ("set_orientation", 0) in fake_engine.calls

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rotation,expected", [(0, 0), (90, 1), (180, 2), (270, 3), (45, 0)])
    async def test_rotation(self, async_client, fake_engine, rotation, expected):
        response = await async_client.post(
            "/api/features/orientation", json={"rotation": rotation}
        )

        assert response.status_code == 200
        assert response.json() == {"rotation": rotation, "orientation": expected}
        assert fake_engine.calls[-1] == ("set_orientation", expected)
