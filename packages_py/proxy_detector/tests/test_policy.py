"""
Tests for the managed-policy detectors.
"""
import pytest
from unittest.mock import MagicMock

from proxy_detector import (
    DeviceManagementDetector,
    FailureKind,
    GroupPolicyDetector,
    InMemoryPolicyStore,
    PolicyDetector,
    PolicyQueries,
    ProxyMode,
    ProxyServer,
)


def gp_store(mode=None, pac_url=None, server=None, bypass=None, managed=True):
    values = {"ProxyMode": mode, "ProxyPacUrl": pac_url, "ProxyServer": server, "ProxyBypassList": bypass}
    return InMemoryPolicyStore({k: v for k, v in values.items() if v is not None}, managed=managed)


def dm_store(mode=None, pac_url=None, server=None, bypass=None, managed=True):
    values = {"proxy_mode": mode, "proxy_pac_url": pac_url, "proxy_server": server, "proxy_bypass_list": bypass}
    return InMemoryPolicyStore({k: v for k, v in values.items() if v is not None}, managed=managed)


class TestGroupPolicyDetector:
    def test_unmanaged_is_absent(self):
        result = GroupPolicyDetector(gp_store(mode="direct", managed=False)).detect()
        assert result.config is None
        assert result.failure.kind == FailureKind.ABSENT

    def test_direct(self):
        config = GroupPolicyDetector(gp_store(mode="direct")).detect().config
        assert config.mode == ProxyMode.NO_PROXY
        assert config.source == "GroupPolicy"

    def test_auto_detect(self):
        assert GroupPolicyDetector(gp_store(mode="auto_detect")).detect().config.mode == ProxyMode.AUTO_DETECT

    def test_pac_script(self):
        config = GroupPolicyDetector(gp_store(mode="pac_script", pac_url="http://pac/p.pac")).detect().config
        assert config.mode == ProxyMode.AUTO_CONFIG_URL
        assert config.auto_config_url == "http://pac/p.pac"

    def test_fixed_servers(self):
        config = GroupPolicyDetector(
            gp_store(mode="fixed_servers", server="http=a:8080;https=b:8443", bypass="localhost;*.corp")
        ).detect().config
        assert config.mode == ProxyMode.NAMED_PROXY
        assert config.http_proxy == ProxyServer(host="a", port=8080)
        assert config.https_proxy == ProxyServer(host="b", port=8443)
        assert config.bypass_list == ("localhost", "*.corp")

    def test_mode_is_case_insensitive(self):
        assert GroupPolicyDetector(gp_store(mode="  Direct ")).detect().config.mode == ProxyMode.NO_PROXY

    def test_system_mode_defers(self):
        result = GroupPolicyDetector(gp_store(mode="system")).detect()
        assert result.config is None
        assert result.failure.kind == FailureKind.ABSENT

    @pytest.mark.parametrize(
        "store",
        [
            gp_store(),
            gp_store(mode="teleport"),
            gp_store(mode="pac_script"),
            gp_store(mode="fixed_servers"),
            gp_store(mode="fixed_servers", server="ftp=c:21"),
            gp_store(mode=1),
            gp_store(mode="fixed_servers", server=3128),
            gp_store(mode="direct", bypass=["localhost"]),
        ],
    )
    def test_malformed_policy_is_not_downgraded(self, store):
        """Missing fields under a mode that needs them fail instead of becoming NoProxy."""
        result = GroupPolicyDetector(store).detect()
        assert result.config is None
        assert result.failure.kind == FailureKind.MALFORMED_SOURCE


class TestDeviceManagementDetector:
    def test_reads_device_management_fields(self):
        config = DeviceManagementDetector(dm_store(mode="pac_script", pac_url="http://dm/p.pac")).detect().config
        assert config.auto_config_url == "http://dm/p.pac"
        assert config.source == "DeviceManagement"

    def test_ignores_group_policy_fields(self):
        """The device-management detector reads its own field names only."""
        result = DeviceManagementDetector(gp_store(mode="direct")).detect()
        assert result.failure.kind == FailureKind.MALFORMED_SOURCE

    @pytest.mark.parametrize(
        "values",
        [
            {"mode": "direct"},
            {"mode": "auto_detect", "bypass": "localhost"},
            {"mode": "pac_script", "pac_url": "http://pac.example.com/proxy.pac"},
            {"mode": "fixed_servers", "server": "proxy.example.com:8080", "bypass": "*.local"},
            {"mode": "fixed_servers", "server": "http=a:1;https=b:2"},
        ],
    )
    def test_matches_group_policy(self, values):
        """Identical backing values give identical configs apart from the label."""
        dm = DeviceManagementDetector(dm_store(**values)).detect().config
        gp = GroupPolicyDetector(gp_store(**values)).detect().config
        assert dm.with_source("") == gp.with_source("")
        assert dm.model_dump(exclude={"source"}) == gp.model_dump(exclude={"source"})


class TestPolicyDetector:
    def test_runs_against_any_query_set(self):
        queries = MagicMock(spec=PolicyQueries)
        queries.is_managed.return_value = True
        queries.get_mode.return_value = "fixed_servers"
        queries.get_server.return_value = "proxy:3128"
        queries.get_bypass_list.return_value = None

        config = PolicyDetector(queries, "Custom").detect().config

        assert config.source == "Custom"
        assert config.http_proxy == ProxyServer(host="proxy", port=3128)
        queries.get_pac_url.assert_not_called()

    def test_unmanaged_reads_nothing_else(self):
        queries = MagicMock(spec=PolicyQueries)
        queries.is_managed.return_value = False
        PolicyDetector(queries, "Custom").detect()
        queries.get_mode.assert_not_called()
