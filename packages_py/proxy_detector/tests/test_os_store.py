"""
Tests for OS proxy store and system default detectors.
"""
from unittest.mock import MagicMock

from proxy_detector import (
    DefaultSystemDetector,
    FailureKind,
    MalformedSourceError,
    OSAutoConfigDetector,
    OSAutoDetectDetector,
    OSNamedDetector,
    ProxyConfig,
    ProxyMode,
    ProxyServer,
    StaticOSProxyStoreQuery,
    StaticSystemProxyQuery,
    SystemProxyQuery,
)

SERVER = ProxyServer(host="proxy.example.com", port=8080)


def make_query(user_context=True):
    return StaticOSProxyStoreQuery(
        auto_detect=ProxyConfig.auto_detect(),
        auto_config=ProxyConfig.auto_config("http://wpad.example.com/wpad.dat"),
        named=ProxyConfig.named(SERVER, SERVER, bypass_list=("<local>",)),
        user_context=user_context,
    )


class TestOSStoreDetectors:
    def test_each_detector_queries_its_class(self):
        query = make_query()
        assert OSAutoDetectDetector(query).detect().config.mode == ProxyMode.AUTO_DETECT
        assert OSAutoConfigDetector(query).detect().config.mode == ProxyMode.AUTO_CONFIG_URL
        named = OSNamedDetector(query).detect().config
        assert named.mode == ProxyMode.NAMED_PROXY
        assert named.bypass_list == ("<local>",)

    def test_sources(self):
        query = make_query()
        assert OSAutoDetectDetector(query).detect().config.source == "OSWPAD"
        assert OSAutoConfigDetector(query).detect().config.source == "OSPAC"
        assert OSNamedDetector(query).detect().config.source == "OSNamed"

    def test_outside_user_context(self):
        """Outside the user's context the store is never read."""
        query = MagicMock(wraps=make_query(user_context=False))
        for detector_cls in (OSAutoDetectDetector, OSAutoConfigDetector, OSNamedDetector):
            result = detector_cls(query).detect()
            assert result.config is None
            assert result.failure.kind == FailureKind.CONTEXT_MISMATCH
        query.get_auto_detect.assert_not_called()
        query.get_auto_config.assert_not_called()
        query.get_named.assert_not_called()

    def test_not_configured(self):
        result = OSNamedDetector(StaticOSProxyStoreQuery()).detect()
        assert result.failure.kind == FailureKind.ABSENT


class TestDefaultSystemDetector:
    def test_returns_default(self):
        query = StaticSystemProxyQuery(ProxyConfig.named(SERVER, None))
        config = DefaultSystemDetector(query).detect().config
        assert config.http_proxy == SERVER
        assert config.https_proxy is None
        assert config.source == "SystemDefault"

    def test_absent(self):
        assert DefaultSystemDetector(StaticSystemProxyQuery()).detect().failure.kind == FailureKind.ABSENT

    def test_malformed_query(self):
        query = MagicMock(spec=SystemProxyQuery)
        query.get_default.side_effect = MalformedSourceError("bad value")
        result = DefaultSystemDetector(query).detect()
        assert result.failure.kind == FailureKind.MALFORMED_SOURCE
        assert "bad value" in result.failure.reason
