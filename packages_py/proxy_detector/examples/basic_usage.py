"""
Basic usage examples for proxy_detector package.

The chain asks each configuration source in priority order and returns
the first configuration found.
"""
from proxy_detector import (
    Collaborators,
    DetectorSettings,
    InMemoryFileReader,
    InMemoryKeyValueStore,
    InMemoryPolicyStore,
    StaticProfileLocator,
    create_detector_chain,
)
from proxy_detector.adapters import HttpxAdapter


# =============================================================================
# Example 1: Resolve from the local machine
# =============================================================================
def example1_local_machine() -> None:
    """
    Without collaborators, the chain reads HTTPS_PROXY / HTTP_PROXY and,
    when browser detectors are enabled, the default Firefox profile.
    """
    chain = create_detector_chain(DetectorSettings(include_browser_detectors=True))
    result = chain.resolve()
    if result.found:
        print(f"Example 1 - {result.source}: {result.config.mode.value}")
    else:
        print("Example 1 - nothing found:")
        for failure in result.diagnostics:
            print(f"  {failure}")


# =============================================================================
# Example 2: Policy overrides the browser
# =============================================================================
def example2_policy_precedence() -> None:
    """
    Group policy sits above browser settings, so its fixed servers win
    even though Firefox is configured for auto-detect.
    """
    reader = InMemoryFileReader()
    reader.write("/ff/prefs.js", 'user_pref("network.proxy.type", 4);', mtime=1)

    collaborators = Collaborators(
        key_value_store=InMemoryKeyValueStore(),
        policy_store=InMemoryPolicyStore({
            "ProxyMode": "fixed_servers",
            "ProxyServer": "proxy.corp.example.com:3128",
            "ProxyBypassList": "localhost;*.corp.example.com",
        }),
        profile_locator=StaticProfileLocator({"firefox": ("default", "/ff/prefs.js")}),
        file_reader=reader,
    )
    chain = create_detector_chain(DetectorSettings(include_browser_detectors=True), collaborators)
    result = chain.resolve()
    print(f"Example 2 - {result.source}: {result.config.proxy_string()}")
    # Output: "GroupPolicy: proxy.corp.example.com:3128"


# =============================================================================
# Example 3: Build an httpx client from the result
# =============================================================================
def example3_httpx_client() -> None:
    collaborators = Collaborators(
        policy_store=InMemoryPolicyStore({"ProxyMode": "fixed_servers", "ProxyServer": "proxy:3128"}),
    )
    result = create_detector_chain(DetectorSettings(), collaborators).resolve()

    with HttpxAdapter().create_sync_client(result.config, timeout=10.0) as client:
        print(f"Example 3 - httpx client routed through {result.config.proxy_string()}: {client}")


def main() -> None:
    print("=== proxy_detector Examples ===\n")

    example1_local_machine()
    example2_policy_precedence()
    example3_httpx_client()

    print("\n=== Examples Complete ===")


if __name__ == "__main__":
    main()
