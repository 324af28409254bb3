"""Unit tests for CLI console helpers."""


class TestConsole:
    """Tests for the rich console helpers."""

    def test_console_is_rich_console(self):
        """Console should be a rich.console.Console."""
        from rich.console import Console

        from routergen_cli.console import console, err_console

        assert isinstance(console, Console)
        assert isinstance(err_console, Console)

    def test_create_table_returns_rich_table(self):
        """create_table should return a titled rich Table."""
        from rich.table import Table

        from routergen_cli.console import create_table

        table = create_table("Router variants")
        assert isinstance(table, Table)
        assert table.title == "Router variants"

    def test_print_success(self, capsys):
        """print_success should write to stdout."""
        from routergen_cli.console import print_success

        print_success("Generated router file: CoreRouter.g.sol")

        captured = capsys.readouterr()
        assert "Generated router file: CoreRouter.g.sol" in captured.out

    def test_print_success_keeps_brackets(self, capsys):
        """Square brackets in paths are printed, not parsed as markup."""
        from routergen_cli.console import print_success

        print_success("Generated router file: out/[v2]/Core.g.sol")

        captured = capsys.readouterr()
        assert "out/[v2]/Core.g.sol" in captured.out

    def test_print_error_goes_to_stderr(self, capsys):
        """print_error should write to stderr, not stdout."""
        from routergen_cli.console import print_error

        print_error("Modules not found: Ghost")

        captured = capsys.readouterr()
        assert "Modules not found: Ghost" in captured.err
        assert "Ghost" not in captured.out

    def test_print_error_keeps_brackets(self, capsys):
        """Square brackets in messages are not treated as markup."""
        from routergen_cli.console import print_error

        print_error("No [router.<name>] entries found")

        assert "[router.<name>]" in capsys.readouterr().err
