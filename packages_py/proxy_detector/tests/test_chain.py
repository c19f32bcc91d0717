"""
Tests for DetectorChain.
"""
import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import pytest

from proxy_detector import (
    BrowserConfigFileDetector,
    DefaultSystemDetector,
    DetectorChain,
    FailureKind,
    GroupPolicyDetector,
    InMemoryFileReader,
    InMemoryPolicyStore,
    MalformedSourceError,
    ProxyConfig,
    ProxyDetector,
    ProxyMode,
    ProxyServer,
    StaticProfileLocator,
    StaticSystemProxyQuery,
)


class FakeDetector(ProxyDetector):
    def __init__(self, name: str, config: Optional[ProxyConfig] = None, error: Exception = None):
        self.name = name
        self.config = config
        self.error = error
        self.calls = 0

    @property
    def source(self) -> str:
        return self.name

    def _detect(self) -> Optional[ProxyConfig]:
        self.calls += 1
        if self.error:
            raise self.error
        return self.config


class TestDetectorChain:
    def test_first_found_wins(self):
        chain = DetectorChain([
            FakeDetector("A"),
            FakeDetector("B", ProxyConfig.auto_detect()),
            FakeDetector("C", ProxyConfig.auto_config("http://pac/p.pac")),
        ])
        result = chain.resolve()
        assert result.found
        assert result.source == "B"
        assert result.config.mode == ProxyMode.AUTO_DETECT
        assert result.config.source == "B"
        assert result.diagnostics == []

    def test_explicit_no_proxy_terminates(self):
        lower = FakeDetector("Lower", ProxyConfig.auto_detect())
        chain = DetectorChain([FakeDetector("Override", ProxyConfig.direct()), lower])
        result = chain.resolve()
        assert result.source == "Override"
        assert result.config.mode == ProxyMode.NO_PROXY
        assert lower.calls == 0

    def test_failures_fall_through(self):
        chain = DetectorChain([
            FakeDetector("Broken", error=MalformedSourceError("bad")),
            FakeDetector("Denied", error=PermissionError("no")),
            FakeDetector("Good", ProxyConfig.auto_detect()),
        ])
        assert chain.resolve().source == "Good"

    def test_unexpected_collaborator_errors_fall_through(self):
        chain = DetectorChain([
            FakeDetector("Attr", error=AttributeError("'int' object has no attribute 'strip'")),
            FakeDetector("Type", error=TypeError("bad operand")),
            FakeDetector("Good", ProxyConfig.auto_detect()),
        ])
        result = chain.resolve()
        assert result.source == "Good"

    def test_non_string_policy_value_falls_through(self):
        system = ProxyConfig.named(ProxyServer(host="proxy", port=3128), ProxyServer(host="proxy", port=3128))
        chain = DetectorChain([
            GroupPolicyDetector(InMemoryPolicyStore({"ProxyMode": 1})),
            DefaultSystemDetector(StaticSystemProxyQuery(system)),
        ])
        result = chain.resolve()
        assert result.source == "SystemDefault"
        assert result.config.http_proxy == ProxyServer(host="proxy", port=3128)
        assert chain.detectors[0].detect().failure.kind == FailureKind.MALFORMED_SOURCE

    def test_all_absent_aggregates_diagnostics(self):
        chain = DetectorChain([
            FakeDetector("A"),
            FakeDetector("B", error=MalformedSourceError("bad value")),
            FakeDetector("C", error=OSError("unreadable")),
        ])
        result = chain.resolve()
        assert not result.found
        assert result.config is None
        assert result.source is None
        assert [(d.source, d.kind) for d in result.diagnostics] == [
            ("A", FailureKind.ABSENT),
            ("B", FailureKind.MALFORMED_SOURCE),
            ("C", FailureKind.IO_FAILURE),
        ]
        assert "bad value" in str(result.diagnostics[1])

    def test_empty_chain(self):
        result = DetectorChain([]).resolve()
        assert not result.found
        assert result.diagnostics == []

    @pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
    def test_lower_priority_content_never_matters(self, order):
        """For any ordering, the first non-absent detector decides the result."""
        configs = [None, ProxyConfig.auto_detect(), ProxyConfig.direct()]
        detectors = [FakeDetector(f"D{i}", configs[i]) for i in order]
        expected = next(d for d in detectors if d.config is not None)

        baseline = DetectorChain(detectors).resolve()
        assert baseline.source == expected.source

        for d in detectors[detectors.index(expected) + 1:]:
            d.config = ProxyConfig.auto_config("http://changed/p.pac")
        assert DetectorChain(detectors).resolve() == baseline

    def test_detectors_are_read_only(self):
        chain = DetectorChain([FakeDetector("A")])
        assert isinstance(chain.detectors, tuple)
        assert len(chain) == 1


class TestConcurrentResolve:
    def test_no_torn_configs(self):
        """Threads resolving while the prefs file flips never see a mixed config."""
        path = "/profile/prefs.js"
        reader = InMemoryFileReader()
        named = "\n".join([
            'user_pref("network.proxy.type", 1);',
            'user_pref("network.proxy.http", "proxy.example.com");',
            'user_pref("network.proxy.http_port", 8080);',
        ])
        pac = "\n".join([
            'user_pref("network.proxy.type", 2);',
            'user_pref("network.proxy.autoconfig_url", "http://pac.example.com/p.pac");',
        ])
        reader.write(path, named, mtime=0)
        detector = BrowserConfigFileDetector(StaticProfileLocator({"firefox": ("p", path)}), reader)
        chain = DetectorChain([FakeDetector("Empty"), detector])

        stop = threading.Event()

        def writer():
            mtime = 1
            while not stop.is_set():
                reader.write(path, pac if mtime % 2 else named, mtime=mtime)
                mtime += 1

        def resolve_many():
            results = []
            for _ in range(200):
                results.append(chain.resolve())
            return results

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        try:
            with ThreadPoolExecutor(max_workers=8) as pool:
                batches = list(pool.map(lambda _: resolve_many(), range(8)))
        finally:
            stop.set()
            writer_thread.join()

        for result in itertools.chain.from_iterable(batches):
            assert result.source == "Firefox"
            config = result.config
            if config.mode == ProxyMode.NAMED_PROXY:
                assert config.auto_config_url is None
                assert config.proxy_string() == "proxy.example.com:8080"
            else:
                assert config.mode == ProxyMode.AUTO_CONFIG_URL
                assert config.auto_config_url == "http://pac.example.com/p.pac"
                assert config.http_proxy is None

    def test_single_parse_per_mtime(self):
        """Concurrent callers on an unchanged file share one parse."""
        path = "/profile/prefs.js"
        reader = InMemoryFileReader()
        reader.write(path, 'user_pref("network.proxy.type", 4);', mtime=7)
        detector = BrowserConfigFileDetector(StaticProfileLocator({"firefox": ("p", path)}), reader)

        with ThreadPoolExecutor(max_workers=16) as pool:
            configs = list(pool.map(lambda _: detector.detect().config, range(64)))

        assert detector.parse_count == 1
        assert all(c is configs[0] for c in configs)
