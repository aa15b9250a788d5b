"""
Multi-call properties of the config, cache and brand helpers.

Runs against the in-memory admin server so state persists between calls.
"""

from adminapi.client import AdminApiClient
from adminapi.dto import AdminConfig, BrandImageOutcome
from tests.helpers.fake_server import DEFAULT_CONFIG, FakeAdminServer


class TestConfigRoundTrip:
    """update_config followed by get_config."""

    def test_full_config_round_trips(self, client, fake_server):
        cfg = client.get_config().config.merged({
            "TeamSettings": {"SiteName": "Round Trip", "MaxUsersPerTeam": 100},
        })

        client.update_config(cfg)
        fetched = client.get_config().config

        assert fetched == cfg

    def test_partial_update_keeps_other_sections(self, client, fake_server):
        client.update_config({"LdapSettings": {"Enable": True}})
        fetched = client.get_config().config

        assert fetched.get("LdapSettings.Enable") is True
        assert fetched.get("LdapSettings.LdapServer") == ""
        assert fetched.get("ServiceSettings") == DEFAULT_CONFIG["ServiceSettings"]

    def test_update_returns_persisted_config(self, client, fake_server):
        result = client.update_config(AdminConfig.model_validate({"TeamSettings": {"SiteName": "X"}}))

        assert result.config.get("TeamSettings.SiteName") == "X"
        assert fake_server.config["TeamSettings"]["SiteName"] == "X"

    def test_reload_returns_current_config(self, client, fake_server):
        fake_server.config["TeamSettings"]["SiteName"] = "Edited on disk"

        result = client.reload_config()

        assert result.config.get("TeamSettings.SiteName") == "Edited on disk"
        assert fake_server.calls == [("POST", "/config/reload"), ("GET", "/config")]


class TestInvalidateCache:
    """invalidate_cache has no side effects outside the cache."""

    def test_touches_only_cache_endpoint(self, client, fake_server):
        config_before = dict(fake_server.config)
        license_before = dict(fake_server.license)

        status = client.invalidate_cache()

        assert status.is_ok
        assert fake_server.calls == [("POST", "/caches/invalidate")]
        assert fake_server.config == config_before
        assert fake_server.license == license_before


class TestDeleteBrandImage:
    """delete_brand_image succeeds whether or not an image exists."""

    def test_existing_image_is_deleted(self, client, mock_session):
        server = FakeAdminServer(brand_image=True)
        mock_session.request.side_effect = server.handle

        assert client.delete_brand_image().outcome is BrandImageOutcome.DELETED
        assert not server.brand_image

    def test_repeated_delete_is_already_absent(self, client, mock_session):
        server = FakeAdminServer(brand_image=True)
        mock_session.request.side_effect = server.handle

        client.delete_brand_image()
        second = client.delete_brand_image()

        assert second.outcome is BrandImageOutcome.ALREADY_ABSENT


class TestAnalytics:
    def test_rows_from_server(self, client, fake_server):
        result = client.get_analytics()

        assert result.as_dict()["post_count"] == 1024
        assert result.analytics[0].name == "channel_open_count"


class TestLogin:
    def test_login_then_admin_calls(self, mock_session, fake_server, fixtures_dir):
        """A client without token logs in and reuses the session token."""
        client = AdminApiClient("http://mm.test:8065", fixtures_dir=fixtures_dir)
        client.login("sysadmin", "secret")

        assert mock_session.headers["Authorization"] == "Bearer session-token"
        assert client.get_config().config.get("TeamSettings.SiteName") == "Mattermost"
