"""Links from test results to the code browser."""

from yarl import URL


def build_symbol_link(base_uri: str, namespace: str, method: str) -> str:
    """Build a symbol search link that jumps to a test method.

    Args:
        base_uri: Base URI of the code browser (e.g., "https://code.example.com"),
            possibly mounted under a path prefix
        namespace: Qualified name of the test case class
        method: Test method name

    Returns:
        The link as a string

    """
    base = URL(base_uri)
    url = base.with_path(
        f"{base.path.rstrip('/')}/diffusion/symbol/{method}/"
    ).with_query(context=namespace, jump="true", lang="python")
    return str(url)
