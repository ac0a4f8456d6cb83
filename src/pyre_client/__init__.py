"""pyre 型チェッカーのクライアント。"""


def main() -> None:
    """パッケージエントリポイント。cli.main() に委譲する。"""
    from pyre_client.cli import main as cli_main

    cli_main()
